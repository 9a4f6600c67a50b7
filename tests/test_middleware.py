"""
Inkwell Backend - Middleware Tests
==================================

What we test:
    ✅ Rate limiter answers 429 with Retry-After once the window is full
    ✅ Exempt paths and a disabled limiter never block
    ✅ Access log level follows the status class
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from inkwell.config import settings
from inkwell.middleware.logging import level_for_status
from inkwell.middleware.rate_limit import RateLimitMiddleware


def _limited_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


@pytest.fixture
def limited_client():
    transport = ASGITransport(app=_limited_app())
    return AsyncClient(transport=transport, base_url="http://test")


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_blocks_after_limit(self, limited_client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_requests", 2)
        monkeypatch.setattr(settings, "rate_limit_window", 60)

        async with limited_client as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            blocked = await client.get("/ping")

        assert blocked.status_code == 429
        assert 1 <= int(blocked.headers["Retry-After"]) <= 61
        assert blocked.json()["error"].startswith("Rate limit exceeded")

    @pytest.mark.asyncio
    async def test_exempt_path(self, limited_client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_requests", 1)

        async with limited_client as client:
            for _ in range(3):
                assert (await client.get("/health")).status_code == 200

    @pytest.mark.asyncio
    async def test_disabled(self, limited_client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", False)
        monkeypatch.setattr(settings, "rate_limit_requests", 1)

        async with limited_client as client:
            for _ in range(3):
                assert (await client.get("/ping")).status_code == 200


class TestAccessLogLevel:
    @pytest.mark.parametrize(
        "status,level",
        [(200, logging.INFO), (304, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level
