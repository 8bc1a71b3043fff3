"""Backend stores and the shared application context.

Stores handle:
- Redis: client lifecycle, ping
- MySQL: async engine lifecycle, ping, session, table creation

`Backends` is built once at startup and shared by every request; either
handle may be None when the backend could not be opened.
"""

from dataclasses import dataclass

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine


@dataclass
class Backends:
    """Process-wide backend handles."""

    enabled: bool = True
    redis: Redis | None = None
    database: AsyncEngine | None = None
