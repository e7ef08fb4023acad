"""Shared fixtures: a throwaway database per test and the gateway app.

Tests run against SQLite in memory unless TEST_DATABASE_URL points at a
PostgreSQL database (its tables are created and dropped around each test).
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from libs.common.rate_limit import limiter
from libs.db.base import Base, LegacyBase
from libs.db.bootstrap import load_models
from libs.db.config import build_engine, build_session_factory
from libs.db.session import get_async_db
from tests.factories import AdminFactory, admin_headers_for

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

load_models()


def _engine_options(url: str) -> dict:
    if make_url(url).get_backend_name() == "sqlite":
        # One shared connection so every session sees the same in-memory db
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


@pytest_asyncio.fixture
async def test_engine():
    engine = build_engine(TEST_DATABASE_URL, **_engine_options(TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.run_sync(LegacyBase.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(LegacyBase.metadata.drop_all)
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory):
    from services.gateway_service.app.main import create_app

    application = create_app()

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_async_db] = _override_get_db
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient with the app and overridden DB dependency.
    """
    limiter.enabled = False
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Admin accounts
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def master_admin(db_session):
    admin = AdminFactory.create(
        username="owner", email="owner@example.com", is_master=True
    )
    db_session.add(admin)
    await db_session.commit()
    return admin


@pytest_asyncio.fixture
async def staff_admin(db_session):
    admin = AdminFactory.create(username="coach", email="coach@example.com")
    db_session.add(admin)
    await db_session.commit()
    return admin


@pytest.fixture
def admin_headers(master_admin) -> dict:
    return admin_headers_for(master_admin)


@pytest.fixture
def staff_headers(staff_admin) -> dict:
    return admin_headers_for(staff_admin)


@pytest.fixture
def rate_limited(client):
    """Turn the application rate limit back on with a clean counter."""
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.reset()
    limiter.enabled = False
