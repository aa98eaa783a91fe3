# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from session_todo.cache.redis_client import RedisKeys, get_redis
from session_todo.config import get_settings
from session_todo.main import app
from session_todo.todo.schemas import SessionData

from .fakes import FakeRedis


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def client(fake_redis: FakeRedis) -> Iterator[TestClient]:
    """
    TestClient wired to an in-memory Redis.

    Used without a `with` block so the lifespan (which pings the real
    Redis) is not triggered.
    """

    async def _override() -> FakeRedis:
        return fake_redis

    app.dependency_overrides[get_redis] = _override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def session_data(client: TestClient, fake_redis: FakeRedis):
    """Return a callable that reads the client's current session from the fake Redis."""

    def _read() -> SessionData:
        session_id = client.cookies.get(get_settings().SESSION_COOKIE_NAME)
        raw = fake_redis.data.get(RedisKeys.session(session_id)) if session_id else None
        return SessionData.model_validate_json(raw) if raw else SessionData()

    return _read
