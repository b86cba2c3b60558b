from __future__ import annotations

import logging
import time
from collections.abc import Mapping

import httpx
from pydantic import BaseModel

logger = logging.getLogger("promptstudio.core.api.http")

REDACTED = "***REDACTED***"


def _lower_set(values: tuple[str, ...]) -> set[str]:
    return {v.lower() for v in values}


def redact_headers(headers: Mapping[str, str], redact: tuple[str, ...]) -> dict[str, str]:
    """Redact sensitive headers for logging.

    Args:
        headers: Headers to redact
        redact: Header names to redact (case-insensitive)

    Returns:
        Headers with sensitive values replaced with "***REDACTED***"
    """
    red = _lower_set(redact)
    return {k: (REDACTED if k.lower() in red else v) for k, v in headers.items()}


def redact_url(url: str | httpx.URL, redact: tuple[str, ...]) -> str:
    """Redact credential query parameters from a URL.

    Args:
        url: URL that may carry a key in its query string
        redact: Query parameter names to redact (case-insensitive)

    Returns:
        URL string with matching parameter values replaced
    """
    parsed = httpx.URL(str(url))
    red = _lower_set(redact)
    for name in list(parsed.params.keys()):
        if name.lower() in red:
            parsed = parsed.copy_set_param(name, REDACTED)
    return str(parsed)


class RequestLogContext(BaseModel):
    """Context for structured HTTP request logging.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL, already redacted
        request_id: Request ID for tracing
    """

    method: str
    url: str
    request_id: str | None = None


def log_request(
    ctx: RequestLogContext, headers: Mapping[str, str], redact: tuple[str, ...]
) -> float:
    """Log HTTP request with redacted headers.

    Returns:
        Start timestamp for elapsed time calculation
    """
    start = time.perf_counter()
    logger.debug(
        "HTTP request",
        extra={
            "method": ctx.method,
            "url": ctx.url,
            "request_id": ctx.request_id,
            "headers": redact_headers(headers, redact),
        },
    )
    return start


def log_response(ctx: RequestLogContext, status_code: int, elapsed_s: float) -> None:
    """Log HTTP response with timing information."""
    logger.debug(
        "HTTP response",
        extra={
            "method": ctx.method,
            "url": ctx.url,
            "request_id": ctx.request_id,
            "status_code": status_code,
            "elapsed_ms": int(elapsed_s * 1000),
        },
    )
