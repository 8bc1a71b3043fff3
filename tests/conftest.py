"""Shared fixtures: in-memory backends and an ASGI client."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from biz.main import create_app
from biz.settings import Settings
from biz.stores import Backends


class FakeRedis:
    """Async stand-in for redis.asyncio.Redis with an up/down switch."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}
        self.calls: list[str] = []
        self.up = True
        self.delay = 0.0
        self.closed = False

    async def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.up:
            raise RedisConnectionError("Error 111 connecting to redis:6379. Connection refused.")

    async def ping(self) -> bool:
        await self._call("ping")
        return True

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        await self._call("set")
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def get(self, key: str) -> str | None:
        await self._call("get")
        return self.data.get(key)

    async def aclose(self) -> None:
        self.closed = True


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env file."""
    return Settings(_env_file=None, **overrides)


def make_sqlite_engine():
    """In-memory SQLite shared across connections of one engine."""
    return create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
async def sqlite_engine():
    engine = make_sqlite_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
async def broken_engine(tmp_path):
    """Engine whose every connection attempt fails (parent dir does not exist)."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/missing/biz.db")
    yield engine
    await engine.dispose()


@pytest.fixture
def settings() -> Settings:
    return make_settings(ping_timeout=0.5, operation_timeout=0.5)


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
async def client(app):
    """Create test client (lifespan is not run; tests install backends)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def install_backends(app):
    """Install a Backends context on the app under test."""

    def _install(redis=None, database=None, enabled: bool = True) -> Backends:
        backends = Backends(enabled=enabled, redis=redis, database=database)
        app.state.backends = backends
        return backends

    return _install
