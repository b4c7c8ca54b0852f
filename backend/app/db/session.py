"""
Async SQLAlchemy engine, session factory and transaction helpers.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.core.errors import ConflictError, StoreError
from app.core.logging import get_logger

logger = get_logger("db.session")


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let pysqlite/aiosqlite emit BEGIN/SAVEPOINT themselves."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        new_engine = create_async_engine(url, **kwargs)
        enable_sqlite_savepoints(new_engine)
        return new_engine
    return create_async_engine(
        url,
        echo=settings.is_development,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        **kwargs,
    )


engine = build_engine(settings.DATABASE_URL)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency that yields an async DB session."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def atomic(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes inside a SAVEPOINT.

    Either every statement in the block applies or none does, and the
    enclosing request transaction stays usable after a failure. Driver
    errors are translated into the application taxonomy.
    """
    try:
        async with db.begin_nested():
            yield db
    except IntegrityError as exc:
        raise ConflictError("Unique constraint violated", details=str(exc.orig)) from exc
    except DBAPIError as exc:
        logger.error("Store error inside transaction", error=str(exc.orig))
        raise StoreError("Database error", details=str(exc.orig)) from exc


async def check_connection() -> bool:
    """Return True when the configured database answers `SELECT 1`."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (DBAPIError, OSError) as exc:
        logger.error("Database unreachable", error=str(exc))
        return False
    return True
