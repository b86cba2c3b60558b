"""Utility functions for HTTP client operations."""

from __future__ import annotations

import base64
from collections.abc import Mapping
from urllib.parse import urljoin


def join_url(base_url: str, path: str) -> str:
    """Join base URL with path in a predictable way.

    Ensures base URL ends with '/' and strips leading '/' from path.

    Args:
        base_url: Base URL (e.g. "https://api.elevenlabs.io")
        path: Request path (e.g. "/v1/voices" or "v1/voices")

    Returns:
        Joined URL (e.g. "https://api.elevenlabs.io/v1/voices")
    """
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, path.lstrip("/"))


def safe_snippet(content: bytes, limit: int) -> str:
    """Extract a text snippet from response content for error reporting.

    Truncates content and decodes as UTF-8 with replacement for invalid bytes.
    """
    if not content:
        return ""
    return content[:limit].decode("utf-8", errors="replace")


def get_request_id(headers: Mapping[str, str]) -> str | None:
    """Extract request ID from common tracing headers.

    Checks for: x-request-id, x-correlation-id, request-id, trace-id (case-insensitive).
    """
    for key in ("x-request-id", "x-correlation-id", "request-id", "trace-id"):
        for hk, hv in headers.items():
            if hk.lower() == key:
                return hv
    return None


def to_data_url(payload: bytes | str, mime_type: str) -> str:
    """Build a self-contained ``data:`` URL.

    Args:
        payload: Raw bytes, or text that is already base64 encoded
        mime_type: MIME type declaration (e.g. "image/png")

    Returns:
        ``data:<mime>;base64,<payload>``
    """
    encoded = payload if isinstance(payload, str) else base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
