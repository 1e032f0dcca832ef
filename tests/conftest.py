"""
Test configuration and fixtures for the college CMS API.

Every test gets a fresh SQLite database (aiosqlite) wired in through a
``get_db`` override, plus helpers for authenticated requests.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("PRODUCTION", "false")

from typing import AsyncGenerator, Callable, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app import models  # noqa: F401
from app.core.database import Base, get_db
from app.dependencies import create_access_token
from app.models.college import College
from app.models.user import User


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
async def engine(tmp_path):
    """A throwaway SQLite database with the full schema."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    # pysqlite defers BEGIN; emit it ourselves so SAVEPOINTs nest properly
    @event.listens_for(test_engine.sync_engine, "connect")
    def _no_autobegin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(test_engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for calling services directly; rolled back afterwards."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app(session_factory):
    """The FastAPI application bound to the test database."""
    from app.main import app as application

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = _get_test_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Users & Auth Fixtures
# =============================================================================

@pytest.fixture
def make_user(session_factory) -> Callable:
    """Insert a user with the given role and return it."""

    async def _make(clerk_id: str, user_type: str = "GUEST", email: str = None) -> User:
        async with session_factory() as session:
            user = User(
                clerk_id=clerk_id,
                email=email or f"{clerk_id}@example.com",
                name=clerk_id.replace("_", " ").title(),
                user_type=user_type,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user.clerk_id, email=user.email, name=user.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user("admin_1", "ADMIN")


@pytest.fixture
async def super_admin_user(make_user) -> User:
    return await make_user("root_1", "SUPERADMIN")


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def super_admin_headers(super_admin_user) -> Dict[str, str]:
    return auth_headers(super_admin_user)


@pytest.fixture
async def guest_headers(make_user) -> Dict[str, str]:
    return auth_headers(await make_user("guest_1", "GUEST"))


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
async def college(session_factory) -> College:
    """A persisted college with an empty FAQ."""
    async with session_factory() as session:
        row = College(name="Engineering", slug="eng", type="ENGINEERING", faq=[])
        session.add(row)
        await session.commit()
        await session.refresh(row)
        return row


@pytest.fixture
async def other_college(session_factory) -> College:
    async with session_factory() as session:
        row = College(name="Medicine", slug="med", type="MEDICAL", faq=[])
        session.add(row)
        await session.commit()
        await session.refresh(row)
        return row
