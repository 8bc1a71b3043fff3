"""Backend connectivity probes.

Each probe runs one operation cycle against a shared handle, bounded by its
own timeout:
- Redis: SET then GET of a fixed key
- MySQL: ensure table, INSERT, SELECT the newest rows
- Liveness: ping either backend

Probes never retry. A missing handle raises BackendNotInitializedError
before any call is made; a failed call raises BackendOperationError.
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from datetime import datetime, timezone
import asyncio
import logging
from typing import TypeVar

from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from biz.models import TestRecord
from biz.schemas import BackendCheck
from biz.stores.database import create_tables, get_session, ping_database
from biz.stores.redis import ping_redis

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")

REDIS = "redis"
MYSQL = "mysql"
BACKEND_LABELS = {REDIS: "Redis", MYSQL: "MySQL"}

REDIS_TEST_KEY = "test:key"
REDIS_TEST_TTL = 60  # seconds
RECENT_RECORDS_LIMIT = 5


class BackendNotInitializedError(Exception):
    """Handle was never opened (startup failed or backends disabled)."""

    def __init__(self, backend: str) -> None:
        self.backend = backend
        super().__init__(f"{BACKEND_LABELS[backend]} not initialized")


class BackendOperationError(Exception):
    """A call against an open handle failed or timed out."""

    def __init__(self, backend: str, operation: str, reason: str) -> None:
        self.backend = backend
        self.operation = operation
        self.reason = reason
        super().__init__(f"{BACKEND_LABELS[backend]} {operation} failed: {reason}")


@dataclass(frozen=True)
class RedisRoundTrip:
    key: str
    value: str


@dataclass(frozen=True)
class MySQLRoundTrip:
    inserted: TestRecord
    recent: list[TestRecord]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _describe(exc: BaseException, timeout: float) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return f"timed out after {timeout:g}s"
    return str(exc) or exc.__class__.__name__


async def _bounded(backend: str, operation: str, coro: Awaitable[T], timeout: float) -> T:
    """Await `coro` within `timeout`, translating failures to BackendOperationError."""
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except Exception as e:
        error = BackendOperationError(backend, operation, _describe(e, timeout))
        logger.warning("%s", error)
        raise error from e


# ============================================================
# Liveness
# ============================================================


async def _check(ping: Awaitable[None], timeout: float) -> BackendCheck:
    try:
        await asyncio.wait_for(ping, timeout=timeout)
    except Exception as e:
        logger.debug("Backend ping failed", exc_info=True)
        return BackendCheck(status="error", error=_describe(e, timeout))
    return BackendCheck(status="connected", test="passed")


async def check_redis(client: Redis | None, timeout: float) -> BackendCheck:
    """Ping Redis and report the outcome instead of raising."""
    if client is None:
        return BackendCheck(status="not_initialized")
    return await _check(ping_redis(client), timeout)


async def check_database(engine: AsyncEngine | None, timeout: float) -> BackendCheck:
    """Ping MySQL and report the outcome instead of raising."""
    if engine is None:
        return BackendCheck(status="not_initialized")
    return await _check(ping_database(engine), timeout)


# ============================================================
# Round-trips
# ============================================================


async def redis_round_trip(client: Redis | None, timeout: float) -> RedisRoundTrip:
    """SET a timestamped value on the test key, then GET it back.

    Args:
        client: Shared Redis handle, or None if never opened.
        timeout: Bound for each of the two calls.

    Returns:
        The key and the value read back.

    Raises:
        BackendNotInitializedError: If `client` is None.
        BackendOperationError: If SET or GET fails or times out.
    """
    if client is None:
        raise BackendNotInitializedError(REDIS)

    value = f"Hello Redis! Time: {utc_now().isoformat()}"
    await _bounded(REDIS, "SET", client.set(REDIS_TEST_KEY, value, ex=REDIS_TEST_TTL), timeout)
    stored = await _bounded(REDIS, "GET", client.get(REDIS_TEST_KEY), timeout)
    if stored is None:
        raise BackendOperationError(REDIS, "GET", f"key {REDIS_TEST_KEY!r} not found")
    return RedisRoundTrip(key=REDIS_TEST_KEY, value=stored)


async def _insert_and_list_recent(engine: AsyncEngine) -> MySQLRoundTrip:
    now = utc_now()
    record = TestRecord(message=f"Hello MySQL! Time: {now.isoformat()}", timestamp=now)
    async with get_session(engine) as session:
        session.add(record)
        await session.flush()
        result = await session.execute(
            select(TestRecord).order_by(TestRecord.id.desc()).limit(RECENT_RECORDS_LIMIT)
        )
        recent = list(result.scalars().all())
    return MySQLRoundTrip(inserted=record, recent=recent)


async def mysql_round_trip(engine: AsyncEngine | None, timeout: float) -> MySQLRoundTrip:
    """Ensure the test table exists, insert one record, read the newest ones.

    Args:
        engine: Shared MySQL engine, or None if never opened.
        timeout: Bound for each stage (migrate, then insert+query).

    Returns:
        The inserted record and up to five most recent records, id descending.

    Raises:
        BackendNotInitializedError: If `engine` is None.
        BackendOperationError: If any stage fails or times out.
    """
    if engine is None:
        raise BackendNotInitializedError(MYSQL)

    await _bounded(MYSQL, "migrate", create_tables(engine), timeout)
    return await _bounded(MYSQL, "insert/query", _insert_and_list_recent(engine), timeout)
