"""Async HTTPX wrapper shared by the vendor clients.

Exposes a small, ergonomic surface:
- AsyncApiClient: high-level client
- HttpClientConfig: configuration
- Exceptions: ApiError and subclasses
- Auth helpers: ApiKeyAuth, QueryKeyAuth
"""

from promptstudio.core.api.http.auth import ApiKeyAuth, QueryKeyAuth
from promptstudio.core.api.http.client import AsyncApiClient
from promptstudio.core.api.http.config import HttpClientConfig
from promptstudio.core.api.http.errors import (
    ApiError,
    AuthError,
    ClientError,
    DecodeError,
    NetworkError,
    RateLimitError,
    ServerError,
    TimeoutError,
    UnexpectedStatusError,
)

__all__ = [
    "AsyncApiClient",
    "HttpClientConfig",
    "ApiKeyAuth",
    "QueryKeyAuth",
    "ApiError",
    "NetworkError",
    "TimeoutError",
    "DecodeError",
    "RateLimitError",
    "AuthError",
    "ClientError",
    "ServerError",
    "UnexpectedStatusError",
]
