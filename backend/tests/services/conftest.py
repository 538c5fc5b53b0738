"""Service test fixtures — async DB + FastAPI test client with a fixed clock.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - get_clock overridden: every request sees FIXED_NOW
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Repositories normalize SQLite's naive datetimes back to UTC, so the same
      assertions hold against PostgreSQL
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import devhabits.models  # noqa: F401
from devhabits.db.base import Base
from devhabits.infrastructure.clock import get_clock
from devhabits.infrastructure.database import get_db, DatabaseSessionManager
import devhabits.infrastructure.database as db_module
from devhabits.main import app


FIXED_NOW = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: fixed_clock

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def reading_habit_payload() -> dict:
    return {
        "name": "Read",
        "type": "measurable",
        "frequency": {"period": "daily", "times": 1},
        "target": {"value": 30, "unit": "minutes"},
        "milestones": [
            {"name": "First hour", "target": 60},
            {"name": "Ten hours", "target": 600},
        ],
    }


@pytest.fixture
def meditate_habit_payload() -> dict:
    return {
        "name": "Meditate",
        "type": "binary",
        "frequency": {"period": "daily", "times": 1},
    }
