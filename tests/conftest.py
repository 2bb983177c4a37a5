"""Pytest configuration and fixtures for querycache tests."""

import asyncio
from typing import Any

import pytest

from querycache.cache import CacheConfig, CacheEvent, QueryCache, RedisStore
from querycache.cache.models import CacheWrite


class FakeQuery:
    """Query descriptor stand-in: serializable via to_sql(), executable via execute()."""

    def __init__(
        self,
        sql: str = "select * from users where id = ?",
        bindings: list[Any] | None = None,
        result: Any = None,
        error: Exception | None = None,
    ):
        self.sql = sql
        self.bindings = [1] if bindings is None else bindings
        self.result = [{"id": 1, "name": "Ada"}] if result is None else result
        self.error = error
        self.calls = 0

    def to_sql(self) -> dict[str, Any]:
        return {"sql": self.sql, "bindings": self.bindings}

    async def execute(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


class InMemoryRedis:
    """Async stand-in for redis.asyncio.Redis covering get/set/ping/aclose."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.expiry: dict[str, int | None] = {}
        self.closed = False

    async def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True


class HangingStore:
    """Store whose reads never complete."""

    def __init__(self) -> None:
        self.get_cancelled = False
        self.writes: list[tuple[str, Any, int | None]] = []

    async def get(self, key: str) -> Any:
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.get_cancelled = True
            raise

    async def set(self, key: str, value: Any, ttl: int | None) -> CacheWrite:
        self.writes.append((key, value, ttl))
        return CacheWrite(key=key, value=b"", ttl=ttl)


@pytest.fixture
def fake_query() -> FakeQuery:
    """Create a default fake query descriptor."""
    return FakeQuery()


@pytest.fixture
def redis_client() -> InMemoryRedis:
    """Create an in-memory Redis client."""
    return InMemoryRedis()


@pytest.fixture
def store(redis_client: InMemoryRedis) -> RedisStore:
    """Create a RedisStore over the in-memory client."""
    return RedisStore(redis_client)


@pytest.fixture
async def query_cache(store: RedisStore):
    """Create a QueryCache using the in-memory store."""
    cache = QueryCache(CacheConfig(), store=store)
    yield cache
    await cache.close()


@pytest.fixture
def event_log(query_cache: QueryCache) -> list[tuple[CacheEvent, Any]]:
    """Record every event emitted by query_cache as (event, payload)."""
    log: list[tuple[CacheEvent, Any]] = []
    for event in CacheEvent:
        query_cache.on(event, lambda payload, event=event: log.append((event, payload)))
    return log
