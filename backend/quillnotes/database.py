"""
QuillNotes Backend - Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine, provides a session dependency that
       auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Pooling:
    PostgreSQL (asyncpg): sized pool from settings, pre-ping, hourly recycle.
    SQLite (aiosqlite):   NullPool. Each session opens its own connection,
                          so nothing is shared between event loops in tests.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from quillnotes.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if settings.is_sqlite:
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

# expire_on_commit=False: attributes stay readable after commit, which the
# routes rely on when they serialize the row they just wrote
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global handlers
        5. Always: closes the session

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_schema() -> None:
    """
    Create all tables known to Base.metadata.

    Used by the test suite and for throwaway SQLite databases; real
    deployments run `alembic upgrade head` instead.
    """
    # Models must be imported so they register with Base.metadata
    from quillnotes.models import note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine() -> None:
    """Closes all pooled connections. Called from the lifespan on shutdown."""
    await engine.dispose()
