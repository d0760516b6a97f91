"""Shared test fixtures."""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

_TEST_DB_DIR = tempfile.mkdtemp(prefix="rootmarks_test_db_")

os.environ["ROOTMARKS_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/rootmarks.db"
os.environ["ROOTMARKS_REDIS_URL"] = ""
os.environ["ROOTMARKS_JWT_SECRET"] = "test-secret-with-enough-length-for-hs256"
os.environ["ROOTMARKS_PLANT_ANALYSIS_URL"] = "https://plants.test/analyze"

from rootmarks.config import get_settings  # noqa: E402

get_settings.cache_clear()

from rootmarks.books.lookup import reset_book_lookup  # noqa: E402
from rootmarks.database import close_db, get_engine, get_session, init_db  # noqa: E402
from rootmarks.db.base import Base  # noqa: E402
from rootmarks.db import models  # noqa: E402, F401
from rootmarks.gamification.seed import seed_badges  # noqa: E402
from rootmarks.main import create_app  # noqa: E402
from rootmarks.plants.analyzer import reset_plant_analyzer  # noqa: E402

TEST_USER_ID = "reader-0001"
TEST_USER_EMAIL = "reader@example.com"


def make_token(sub: str = TEST_USER_ID, **claims: Any) -> str:  # noqa: ANN401
    """Mint an identity-provider style token signed with the test secret."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": sub,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": now + timedelta(hours=1),
        "email": TEST_USER_EMAIL,
    }
    payload.update(claims)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema with seeded badges for every test."""
    settings = get_settings()
    await init_db(settings.database_url)

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async for session in get_session():
        await seed_badges(session)
        break

    yield

    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for test assertions."""
    async for session in get_session():
        yield session
        break


@pytest.fixture
def app(database: None) -> Any:  # noqa: ANN401
    """Application instance; tests may set dependency_overrides on it."""
    reset_book_lookup()
    reset_plant_analyzer()
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:  # noqa: ANN401
    """Create an async HTTP test client against a fresh database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def token_factory() -> Callable[..., str]:
    return make_token


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient) -> AsyncClient:
    """Client carrying a valid bearer token for TEST_USER_ID."""
    client.headers["Authorization"] = f"Bearer {make_token()}"
    return client
