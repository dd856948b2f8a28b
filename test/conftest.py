from __future__ import annotations

import os
from typing import Iterable

import httpx
import pytest

# Point the application at an in-memory database and fixed secrets BEFORE any
# commerflow module builds its settings, engine or logging configuration.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["COMMERFLOW_ENV"] = "test"
os.environ["COMMERFLOW_LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET"] = "commerflow-test-secret-0123456789abcdef"
os.environ["JWT_EXPIRES_IN"] = "1h"
os.environ["CACHE_TTL_SECONDS"] = "300"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"
os.environ["LOGFIRE_ENABLED"] = "false"
os.environ["ENABLE_FILE_LOGGING"] = "false"


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
    yield


@pytest.fixture(autouse=True)
def _fresh_response_cache():
    """Every test starts with an empty catalogue cache and zeroed metrics."""
    from commerflow.core.cache import get_cache

    cache = get_cache()
    cache.clear()
    cache.metrics.reset()
    yield
    cache.clear()
