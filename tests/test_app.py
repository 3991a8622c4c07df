"""
Application-level tests: health endpoints and error rendering
"""
import logging

import pytest
from httpx import AsyncClient, ASGITransport
from pymongo.errors import ServerSelectionTimeoutError

from linkedin_service.api.dependencies import get_feed_service
from linkedin_service.config import settings
from linkedin_service.main import app


@pytest.mark.asyncio
async def test_root_and_health(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["service"] == settings.APP_NAME

    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
    assert r.json()["database"] == "connected"


class _UnavailableFeedService:
    async def list_posts(self, page, limit, author_id=None):
        raise ServerSelectionTimeoutError("no servers available")


@pytest.fixture
def store_down():
    app.dependency_overrides[get_feed_service] = lambda: _UnavailableFeedService()
    yield
    app.dependency_overrides.pop(get_feed_service, None)


@pytest.mark.asyncio
async def test_store_failure_is_500_without_details(client, store_down, monkeypatch):
    monkeypatch.setattr(settings, "DEBUG", False)

    r = await client.get(f"{settings.API_PREFIX}/posts")
    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "Server error"}


@pytest.mark.asyncio
async def test_store_failure_details_in_debug_mode(client, store_down, monkeypatch):
    monkeypatch.setattr(settings, "DEBUG", True)

    r = await client.get(f"{settings.API_PREFIX}/posts")
    assert r.status_code == 500
    assert "no servers available" in r.json()["error"]


class _BrokenFeedService:
    async def list_posts(self, page, limit, author_id=None):
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_failed_request_is_still_logged(db, caplog, monkeypatch):
    monkeypatch.setattr(settings, "DEBUG", False)
    caplog.set_level(logging.INFO, logger="linkedin_service.middlewares.request_logger")
    app.dependency_overrides[get_feed_service] = lambda: _BrokenFeedService()
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            r = await c.get(f"{settings.API_PREFIX}/posts")
    finally:
        app.dependency_overrides.pop(get_feed_service, None)

    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "Server error"}
    assert any(
        f"GET {settings.API_PREFIX}/posts 500" in record.getMessage() for record in caplog.records
    )
