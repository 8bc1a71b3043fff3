"""Startup/shutdown behavior (runs the real lifespan via TestClient)."""

import pytest
from fastapi.testclient import TestClient

from biz import main
from biz.main import create_app
from tests.conftest import FakeRedis, make_settings, make_sqlite_engine


def test_startup_survives_unreachable_backends(monkeypatch: pytest.MonkeyPatch):
    async def failing_open(settings):
        raise ConnectionError("connection refused")

    monkeypatch.setattr(main, "open_redis", failing_open)
    monkeypatch.setattr(main, "open_database", failing_open)

    with TestClient(create_app(make_settings())) as client:
        assert client.get("/ping").status_code == 200

        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["redis"] == "disconnected"
        assert health.json()["mysql"] == "disconnected"

        assert client.get("/test-redis").status_code == 503
        assert client.get("/test-mysql").status_code == 503


def test_startup_one_backend_failing_keeps_the_other(monkeypatch: pytest.MonkeyPatch):
    fake = FakeRedis()

    async def open_redis(settings):
        return fake

    async def failing_open(settings):
        raise ConnectionError("connection refused")

    monkeypatch.setattr(main, "open_redis", open_redis)
    monkeypatch.setattr(main, "open_database", failing_open)

    with TestClient(create_app(make_settings())) as client:
        assert client.get("/test-redis").status_code == 200
        assert client.get("/test-mysql").status_code == 503

        data = client.get("/test-all").json()
        assert data["redis"]["status"] == "connected"
        assert data["mysql"]["status"] == "not_initialized"


def test_handles_opened_at_startup_and_closed_at_shutdown(monkeypatch: pytest.MonkeyPatch):
    fake = FakeRedis()
    engines = []

    async def open_redis(settings):
        return fake

    async def open_database(settings):
        engine = make_sqlite_engine()
        engines.append(engine)
        return engine

    monkeypatch.setattr(main, "open_redis", open_redis)
    monkeypatch.setattr(main, "open_database", open_database)

    app = create_app(make_settings())
    with TestClient(app) as client:
        assert client.get("/test-mysql").status_code == 200
        assert app.state.backends.database is engines[0]

    assert fake.closed
    assert app.state.backends.redis is None
    assert app.state.backends.database is None


def test_backends_disabled_skips_connecting(monkeypatch: pytest.MonkeyPatch):
    async def must_not_open(settings):
        raise AssertionError("backend opened while disabled")

    monkeypatch.setattr(main, "open_redis", must_not_open)
    monkeypatch.setattr(main, "open_database", must_not_open)

    with TestClient(create_app(make_settings(backends_enabled=False))) as client:
        health = client.get("/health").json()
        assert health["redis"] == "disabled"
        assert health["mysql"] == "disabled"

        response = client.get("/test-redis")
        assert response.status_code == 503
        assert response.json()["code"] == "REDIS_NOT_INITIALIZED"
        assert client.get("/test-all").json()["mysql"] == {"status": "not_initialized"}
