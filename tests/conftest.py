"""
Shared test configuration.

Every test gets a fresh in-memory SQLite database (aiosqlite) with the full
schema, a session factory bound to it, and an httpx client wired to the
FastAPI app with `get_db` pointed at that database.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-bytes-for-hs256"

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.constants import UserRole
from app.db.models import Base
from app.db.session import build_engine
from app.main import create_app
from tests.api.support import auth_headers, create_user


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    test_engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Session for repository-level tests; never committed."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    app = create_app()

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
async def admin_user(session_factory):
    return await create_user(session_factory, email="admin@boost.test", role=UserRole.ADMIN)


@pytest.fixture
async def editor_user(session_factory):
    return await create_user(session_factory, email="editor@boost.test", role=UserRole.EDITOR)


@pytest.fixture
async def plain_user(session_factory):
    return await create_user(session_factory, email="reader@boost.test", role=UserRole.USER)


@pytest.fixture
def admin_headers(admin_user) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def editor_headers(editor_user) -> dict[str, str]:
    return auth_headers(editor_user)


@pytest.fixture
def user_headers(plain_user) -> dict[str, str]:
    return auth_headers(plain_user)
