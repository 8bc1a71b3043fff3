"""MySQL store with async SQLAlchemy.

Handles:
- Engine creation (aiomysql driver, library-default pooling)
- Session management
- Table creation for the connectivity-test model
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import logging

from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from biz.settings import Settings

logger = logging.getLogger("uvicorn.error")


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


async def open_database(settings: Settings) -> AsyncEngine:
    """Create the async engine and validate connectivity.

    The engine is disposed before re-raising if the first connection fails.
    """
    if not settings.db_password:
        logger.warning("DB_PASSWORD is not set; connecting to MySQL without a password")

    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        connect_args={"connect_timeout": settings.connect_timeout},
        pool_pre_ping=True,
    )
    try:
        await ping_database(engine)
    except BaseException:
        # Includes cancellation by the caller's connect timeout.
        await engine.dispose()
        raise
    logger.info("MySQL connected (%s:%s/%s)", settings.db_host, settings.db_port, settings.db_name)
    return engine


async def close_database(engine: AsyncEngine | None) -> None:
    """Dispose of the engine's connection pool."""
    if engine is not None:
        await engine.dispose()


async def ping_database(engine: AsyncEngine) -> None:
    """Run a trivial query, raising on failure."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


@asynccontextmanager
async def get_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Get database session context manager.

    Usage:
        async with get_session(engine) as session:
            result = await session.execute(query)
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables (existing tables are left untouched).

    Two first callers can both see a table as missing; the loser's CREATE
    fails with "table exists". That error is ignored once every table is
    confirmed present.
    """
    # Register models on Base.metadata.
    import biz.models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except OperationalError:
        async with engine.connect() as conn:
            missing = await conn.run_sync(_missing_tables)
        if missing:
            raise
        logger.info("Tables created concurrently by another request")


def _missing_tables(sync_conn) -> list[str]:
    existing = set(inspect(sync_conn).get_table_names())
    return [name for name in Base.metadata.tables if name not in existing]
