"""Async HTTPX wrapper used by every vendor client.

Each call is a single attempt: generation endpoints bill per request, so a
failure is reported to the caller and never replayed. Errors are raised as
the typed ``ApiError`` hierarchy with the request URL already redacted.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from promptstudio.core.api.http.config import HttpClientConfig
from promptstudio.core.api.http.errors import (
    ApiError,
    DecodeError,
    NetworkError,
    TimeoutError,
    error_for_status,
)
from promptstudio.core.api.http.logging_utils import (
    RequestLogContext,
    log_request,
    log_response,
    redact_url,
)
from promptstudio.core.api.http.utils import get_request_id, join_url, safe_snippet

REQUEST_ID_HEADER = "X-Request-Id"


def _new_request_id() -> str:
    return f"ps-{uuid.uuid4().hex[:16]}"


def _looks_like_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "").lower()
    return "application/json" in content_type or "+json" in content_type


class AsyncApiClient:
    """One-shot async client bound to a vendor base URL.

    Args:
        config: Client configuration
        auth: Optional credential handler (ApiKeyAuth, QueryKeyAuth)
        transport: Optional HTTPX transport (tests use httpx.MockTransport)

    Example:
        >>> config = HttpClientConfig(base_url="https://api.elevenlabs.io")
        >>> async with AsyncApiClient(config, auth=ApiKeyAuth(...)) as http:
        ...     voices = http.json(await http.get("/v1/voices"))
    """

    def __init__(
        self,
        config: HttpClientConfig,
        *,
        auth: httpx.Auth | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={"User-Agent": config.user_agent, **config.headers},
            params=config.params,
            timeout=config.timeout,
            limits=config.limits,
            follow_redirects=config.follow_redirects,
            verify=config.verify,
            auth=auth,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AsyncApiClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _error(
        self,
        exc_type: type[ApiError],
        message: str,
        ctx: RequestLogContext,
        *,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> ApiError:
        """Build a typed error carrying whatever the response revealed."""
        fields: dict[str, Any] = {"request_id": ctx.request_id}
        if response is not None:
            fields.update(
                status_code=response.status_code,
                request_id=get_request_id(response.headers) or ctx.request_id,
                response_headers=dict(response.headers),
                response_body_snippet=safe_snippet(
                    response.content or b"", self.config.max_response_body_for_error
                ),
            )
        return exc_type(message=message, method=ctx.method, url=ctx.url, cause=cause, **fields)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        json_body: Any = None,
        data: Any = None,
        timeout: httpx.Timeout | None = None,
        expected_status: Sequence[int] | None = None,
    ) -> httpx.Response:
        """Send one request.

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            params: Extra query parameters
            headers: Extra headers
            json_body: JSON-serializable body
            data: Form fields (sent urlencoded)
            timeout: Per-request timeout override
            expected_status: Accepted status codes (default: anything below 400)

        Returns:
            The successful response

        Raises:
            ApiError: TimeoutError, NetworkError or a status-specific subclass
        """
        url = join_url(str(self._client.base_url), path)
        send_headers = httpx.Headers(self._client.headers)
        send_headers.update(headers or {})
        request_id = send_headers.setdefault(REQUEST_ID_HEADER, _new_request_id())
        query = {**self._client.params, **{k: str(v) for k, v in (params or {}).items()}}

        ctx = RequestLogContext(
            method=method.upper(),
            url=redact_url(httpx.URL(url, params=query), self.config.redact_params),
            request_id=request_id,
        )
        start = log_request(ctx, send_headers, self.config.redact_headers)

        try:
            response = await self._client.request(
                ctx.method,
                url,
                params=query,
                headers=send_headers,
                json=json_body,
                data=data,
                timeout=timeout or self.config.timeout,
            )
        except httpx.TimeoutException as e:
            raise self._error(TimeoutError, "Request timed out", ctx, cause=e) from e
        except httpx.RequestError as e:
            raise self._error(
                NetworkError, "Network error while sending request", ctx, cause=e
            ) from e

        log_response(ctx, response.status_code, time.perf_counter() - start)

        if expected_status is None:
            if response.status_code < 400:
                return response
            message = "HTTP error response"
        else:
            if response.status_code in expected_status:
                return response
            message = f"Unexpected status code (expected {list(expected_status)})"
        raise self._error(error_for_status(response.status_code), message, ctx, response=response)

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    def json(self, response: httpx.Response) -> Any:
        """Decode a JSON response body.

        Returns:
            Decoded value, or None for an empty body

        Raises:
            DecodeError: If the body is not declared as JSON or does not parse
        """
        if not response.content:
            return None
        ctx = RequestLogContext(
            method=response.request.method,
            url=redact_url(response.request.url, self.config.redact_params),
            request_id=response.request.headers.get(REQUEST_ID_HEADER),
        )
        if not _looks_like_json(response):
            raise self._error(
                DecodeError, "Response is not JSON (content-type mismatch)", ctx, response=response
            )
        try:
            return response.json()
        except ValueError as e:
            raise self._error(
                DecodeError, "Failed to parse JSON response", ctx, response=response, cause=e
            ) from e
