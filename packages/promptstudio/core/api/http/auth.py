"""Per-request credential helpers.

Every vendor call carries the caller's key explicitly, so auth objects are
built per call and never cached on a client.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import httpx
from pydantic import BaseModel, Field


class ApiKeyAuth(httpx.Auth, BaseModel):
    """Static API key header authentication.

    Args:
        header_name: Header name for the API key (e.g. "xi-api-key")
        api_key: API key value
        prefix: Optional prefix for the key value (e.g. "Bearer")

    Example:
        >>> auth = ApiKeyAuth(header_name="xi-api-key", api_key="secret")
        >>> # Or with bearer prefix:
        >>> auth = ApiKeyAuth(header_name="Authorization", api_key="token", prefix="Bearer")
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    header_name: str
    api_key: str = Field(repr=False)
    prefix: str | None = None

    def _value(self) -> str:
        return f"{self.prefix} {self.api_key}" if self.prefix else self.api_key

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[self.header_name] = self._value()
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        request.headers[self.header_name] = self._value()
        yield request


class QueryKeyAuth(httpx.Auth, BaseModel):
    """API key carried as a URL query parameter.

    Used by vendors that authenticate with ``?key=...`` instead of a header.
    Logged URLs have the parameter redacted (see ``HttpClientConfig.redact_params``).

    Args:
        param_name: Query parameter name (e.g. "key")
        api_key: API key value

    Example:
        >>> auth = QueryKeyAuth(param_name="key", api_key="secret")
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    param_name: str
    api_key: str = Field(repr=False)

    def _apply(self, request: httpx.Request) -> None:
        request.url = request.url.copy_set_param(self.param_name, self.api_key)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        self._apply(request)
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        self._apply(request)
        yield request
