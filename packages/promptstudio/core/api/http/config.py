from __future__ import annotations

import httpx
from pydantic import BaseModel, Field, field_validator


class HttpClientConfig(BaseModel):
    """Configuration for AsyncApiClient.

    One config is built per vendor endpoint. Generation calls are slow
    (image synthesis routinely takes tens of seconds), so the default read
    timeout is far looser than a typical REST API would use.

    Args:
        base_url: Base URL for all requests (e.g. "https://api.stability.ai")
        timeout: HTTPX timeout configuration
        limits: Connection pool limits
        follow_redirects: Whether to follow HTTP redirects
        headers: Default headers applied to all requests
        params: Default query parameters applied to all requests
        verify: TLS certificate verification (True, False, or path to CA bundle)
        user_agent: User-Agent header value
        redact_headers: Headers to redact in logs (case-insensitive)
        redact_params: Query parameters to redact in logged URLs (case-insensitive)
        max_response_body_for_error: Max response bytes to include in error messages
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    base_url: str
    timeout: httpx.Timeout = Field(default_factory=lambda: httpx.Timeout(120.0, connect=10.0))
    limits: httpx.Limits = Field(
        default_factory=lambda: httpx.Limits(max_keepalive_connections=5, max_connections=10)
    )
    follow_redirects: bool = True
    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, str] = Field(default_factory=dict)
    verify: bool | str = True
    user_agent: str = "promptstudio/0.3"
    redact_headers: tuple[str, ...] = (
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "xi-api-key",
    )
    redact_params: tuple[str, ...] = ("key", "api_key")
    max_response_body_for_error: int = 4096

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base_url is a valid URL."""
        if not v:
            raise ValueError("base_url cannot be empty")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v
