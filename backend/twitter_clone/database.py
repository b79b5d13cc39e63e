"""
Twitter Clone Backend - Database Session Management
====================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
How:   Creates an async engine once at import, hands out one session per request
       that commits on success and rolls back on error.
Who:   Route handlers via FastAPI's dependency injection; the app lifespan for
       table bootstrap and engine disposal.

Connection Pooling:
    PostgreSQL (asyncpg) uses a queue pool sized from settings.
    SQLite (aiosqlite) uses SQLAlchemy's default pool for file databases;
    the pool sizing options are not passed for SQLite URLs.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from twitter_clone.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        # SQL echo only in DEBUG mode
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after the request commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers its table on `Base.metadata`, which `create_tables()`
    uses to bootstrap an empty database.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)

    Every statement a handler issues runs inside this one transaction. There
    is no retry; storage errors propagate to the global error handlers.

    Example usage in a route:
        @router.get("/user/following/")
        async def following(db: AsyncSession = Depends(get_db_session)):
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


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables(bind: AsyncEngine = engine) -> None:
    """
    What:  Creates any missing tables (`user`, `follower`, `tweet`, `like`, `reply`).
    When:  During application startup when CREATE_TABLES_ON_STARTUP is true,
           and by the test suite against its own engine.
    How:   Runs `Base.metadata.create_all` through the async connection.
           Existing tables are left untouched.
    """
    # Registers every model on Base.metadata
    import twitter_clone.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_connection(bind: AsyncEngine = engine) -> None:
    """Executes `SELECT 1`; raises whatever the driver raises when unreachable."""
    async with bind.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    """
    What:  Closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
