"""Mapping of HTTP-layer exceptions to ``Failure`` values."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from promptstudio.core.api.http.errors import ApiError, DecodeError
from promptstudio.core.api.media.models import Failure, FailureKind


def vendor_message(body: Any, paths: Sequence[str]) -> str | None:
    """Find the vendor's own error message in a JSON error body.

    Each path is dotted (``"error.message"``). The first path that resolves
    to a non-empty string wins.

    Args:
        body: Decoded JSON error body (any shape)
        paths: Candidate dotted paths, in priority order

    Returns:
        The vendor message, or None when no path matches

    Example:
        >>> vendor_message({"detail": {"message": "invalid_api_key"}}, ["detail.message"])
        'invalid_api_key'
    """
    for path in paths:
        node = body
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                node = None
                break
            node = node[part]
        if isinstance(node, str) and node.strip():
            return node
    return None


def failure_from_error(
    exc: Exception,
    *,
    message_paths: Sequence[str],
    generic_message: str,
) -> Failure:
    """Convert any exception raised during a vendor call into a Failure.

    Args:
        exc: Exception caught at the client boundary
        message_paths: Dotted paths to the vendor message in an error body
        generic_message: Message used when the vendor supplied none

    Returns:
        Failure describing the error
    """
    if isinstance(exc, DecodeError):
        return Failure(
            kind=FailureKind.TRANSPORT,
            message=f"Malformed response from vendor: {exc.message}",
            status_code=exc.status_code,
        )

    if isinstance(exc, ApiError):
        if exc.status_code is not None:
            message = vendor_message(exc.json_body(), message_paths) or generic_message
            return Failure(
                kind=FailureKind.VENDOR_REJECTION,
                message=message,
                status_code=exc.status_code,
            )
        detail = f"{exc.message}: {exc.cause}" if exc.cause else exc.message
        return Failure(kind=FailureKind.TRANSPORT, message=detail)

    return Failure(kind=FailureKind.TRANSPORT, message=str(exc) or generic_message)


def malformed_response(exc: Exception) -> Failure:
    """Failure for a 2xx body whose JSON does not have the documented shape."""
    return Failure(kind=FailureKind.TRANSPORT, message=f"Malformed response from vendor: {exc}")
