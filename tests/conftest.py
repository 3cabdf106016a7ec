"""Pytest configuration and fixtures for service and API tests."""
import os
import tempfile
from pathlib import Path

# Set test env BEFORE any imports that use config
_db_dir = tempfile.mkdtemp(prefix="conduit-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_db_dir) / 'test.db'}"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"

import pytest
from httpx import ASGITransport, AsyncClient

from conduit.models.base import async_session_factory, drop_db, init_db
from conduit.services.article_store import SqlArticleStore
from conduit.services.auth_service import AuthService
from conduit.services.stats import StatsEngine
from conduit.services.user_store import SqlUserStore
from web.api.main import app

TEST_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
async def _fresh_db():
    """Recreate tables before each test (ASGI lifespan doesn't run with httpx)."""
    await drop_db()
    await init_db()


@pytest.fixture
def user_store():
    return SqlUserStore(async_session_factory)


@pytest.fixture
def article_store():
    return SqlArticleStore(async_session_factory)


@pytest.fixture
def auth_service(user_store):
    return AuthService(user_store, secret=TEST_SECRET)


@pytest.fixture
def stats_engine(user_store, article_store):
    return StatsEngine(user_store, article_store)


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def auth_headers(client):
    """Sign up alice and return Authorization headers for protected endpoints."""
    r = await client.post(
        "/api/users",
        json={"user": {"username": "alice", "email": "alice@x.com", "password": "pw1"}},
    )
    assert r.status_code == 200, f"Signup failed: {r.text}"
    token = r.json()["user"]["token"]
    return {"Authorization": f"Token {token}"}
