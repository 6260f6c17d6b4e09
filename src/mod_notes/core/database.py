"""
Database Configuration

Async SQLAlchemy 2.0 setup with connection pooling and session management.
Uses asyncpg as the PostgreSQL driver for non-blocking I/O.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mod_notes.core.config import settings
from mod_notes.models.base import Base

logger = logging.getLogger(__name__)

# Async engine with connection pooling (default pool_size=5, max_overflow=10)
engine = create_async_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)

# expire_on_commit=False: prevents implicit I/O after commit when accessing attributes
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Yields:
        AsyncSession: Scoped to the request lifecycle. Automatically closed
        after the request completes (including on exceptions).
    """
    async with AsyncSessionLocal() as session:
        yield session


async def ping_database() -> bool:
    """Run ``SELECT 1`` against the pool. Returns False on any connection error."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.debug(f"Database ping failed: {e}")
        return False


async def wait_for_db(
    retries: int = settings.DB_CONNECT_RETRIES,
    delay: int = settings.DB_CONNECT_DELAY,
) -> bool:
    """
    Wait for PostgreSQL to become available.

    The database container may come up after the API in docker compose,
    so startup polls with a fixed delay between attempts.

    Args:
        retries: Maximum connection attempts.
        delay: Seconds between attempts.

    Returns:
        True if connection established, False if all retries exhausted.
    """
    for i in range(retries):
        if await ping_database():
            logger.info("Postgres connection established")
            return True
        logger.warning(f"Waiting for Postgres ({i + 1}/{retries})...")
        await asyncio.sleep(delay)
    return False


async def dispose_engine() -> None:
    """Close every pooled connection at application shutdown."""
    await engine.dispose()
    logger.info("Database engine disposed")


# Re-export Base for Alembic migrations compatibility
__all__ = [
    "Base",
    "engine",
    "AsyncSessionLocal",
    "get_db",
    "ping_database",
    "wait_for_db",
    "dispose_engine",
]
