"""
Pytest configuration and fixtures.

Async tests run against an in-memory SQLite database built from the ORM
metadata, so nothing depends on a running PostgreSQL server.
"""
import os

# Must be set before fitlog.core.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import uuid
from datetime import datetime
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import fitlog.models  # noqa: F401  (registers tables)
from fitlog.core.database import Base, get_db
from fitlog.main import app
from fitlog.services.analytics import AnalyticsService, UserLockRegistry, WorkoutEvent


def make_event(
    event_id: str,
    occurred_at: datetime,
    duration: int = 30,
    calories: Optional[int] = 200,
    user_id: str = "user-1",
) -> WorkoutEvent:
    """Build a WorkoutEvent with test defaults."""
    return WorkoutEvent(
        id=event_id,
        user_id=user_id,
        occurred_at=occurred_at,
        duration=duration,
        calories_burned=calories,
    )


@pytest.fixture
def user_id() -> str:
    """A fresh user ID per test."""
    return str(uuid.uuid4())


@pytest.fixture
async def db_engine():
    """In-memory database shared by every session in a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def locks() -> UserLockRegistry:
    return UserLockRegistry()


@pytest.fixture
def service(db, locks) -> AnalyticsService:
    return AnalyticsService(db, locks=locks)


@pytest.fixture
async def client(session_maker):
    """HTTP client bound to the app with get_db pointed at the test database."""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
