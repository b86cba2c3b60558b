"""Shared pytest fixtures for promptstudio tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def recorded() -> list[httpx.Request]:
    """Requests seen by a mock transport built with ``mock_transport``."""
    return []


@pytest.fixture
def mock_transport(recorded: list[httpx.Request]) -> Callable[[Handler], httpx.MockTransport]:
    """Build an httpx.MockTransport that records every request it serves."""

    def build(handler: Handler) -> httpx.MockTransport:
        def recording(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return handler(request)

        return httpx.MockTransport(recording)

    return build
