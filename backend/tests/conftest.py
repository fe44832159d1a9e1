"""
Markpad Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession for service unit tests (no DB)
    ├── db_engine:       Async SQLite engine on a temp file, schema created
    ├── session_factory: async_sessionmaker bound to db_engine
    ├── users:           Two persisted users (alice, bob)
    ├── auth_headers / other_auth_headers: Bearer headers for alice / bob
    ├── test_client:     HTTPX AsyncClient talking to the app, with
    │                    get_db_session overridden to use db_engine
    └── server_error_client: Same, but app exceptions become 500 responses
"""

import os
import tempfile

# Settings are read once at import of app.config; set the environment first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="markpad_test_"), "app.db"
)
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from contextlib import asynccontextmanager  # noqa: E402
from typing import Dict, Tuple  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, get_db_session  # noqa: E402
from app.models.bookmark import Bookmark  # noqa: E402,F401
from app.models.note import Note  # noqa: E402,F401
from app.models.user import User  # noqa: E402
from app.security import create_access_token  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
            result = await note_service.get_record(mock_db_session, owner_id, str(note.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database-backed fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Fresh SQLite database per test, schema built from the models."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'markpad.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def users(session_factory) -> Tuple[User, User]:
    alice = User(id=uuid4(), email="alice@example.com", display_name="Alice")
    bob = User(id=uuid4(), email="bob@example.com", display_name="Bob")
    async with session_factory() as session:
        session.add_all([alice, bob])
        await session.commit()
    return alice, bob


@pytest.fixture
def auth_headers(users) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(users[0].id)}"}


@pytest.fixture
def other_auth_headers(users) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(users[1].id)}"}


@asynccontextmanager
async def _app_client(session_factory, raise_app_exceptions: bool = True):
    """
    HTTPX AsyncClient routed straight into the FastAPI app (no server).

    Every request gets a session from the per-test database, committed on
    success and rolled back on error, like app.database.get_db_session.
    """
    from app.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(session_factory):
    async with _app_client(session_factory) as client:
        yield client


@pytest_asyncio.fixture
async def server_error_client(session_factory):
    """Like test_client, but unhandled errors come back as the 500 response."""
    async with _app_client(session_factory, raise_app_exceptions=False) as client:
        yield client
