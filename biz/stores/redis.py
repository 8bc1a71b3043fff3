"""Redis store.

Handles:
- Client creation from settings
- Liveness ping
- Shutdown

The client keeps its own connection pool and is safe to share across
concurrent requests.
"""

import logging

import redis.asyncio as redis

from biz.settings import Settings

logger = logging.getLogger("uvicorn.error")


async def open_redis(settings: Settings) -> redis.Redis:
    """Create a Redis client and validate connectivity.

    Raises whatever the ping raises; the client is closed before re-raising.
    """
    client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=settings.connect_timeout,
        socket_timeout=settings.operation_timeout,
    )
    try:
        await client.ping()
    except BaseException:
        # Includes cancellation by the caller's connect timeout.
        await client.aclose()
        raise
    logger.info("Redis connected (%s:%s)", settings.redis_host, settings.redis_port)
    return client


async def close_redis(client: redis.Redis | None) -> None:
    """Close Redis client."""
    if client is not None:
        await client.aclose()


async def ping_redis(client: redis.Redis) -> None:
    """Ping Redis, raising on failure."""
    await client.ping()
