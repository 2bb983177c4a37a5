"""Caching - serve repeated queries from Redis.

Wraps a slow query in QueryCache and shows the second call being served
from the cache. Without Redis the calls still succeed, just slower.
"""

import asyncio
import time

from querycache import CacheConfig, QueryCache


class SlowQuery:
    """Stand-in for a query builder: serializable and awaitable."""

    def __init__(self, sql: str, bindings: list):
        self.sql = sql
        self.bindings = bindings

    def to_sql(self):
        return self.sql, self.bindings

    async def execute(self):
        await asyncio.sleep(0.5)
        return [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Grace"}]


async def main():
    print("Cache Demo\n")

    cache = QueryCache(CacheConfig(timeout_ms=200))
    cache.on("get-cache-error", lambda err: print(f"  get error: {err}"))
    cache.on("set-cache-error", lambda err: print(f"  set error: {err}"))
    cache.on("get-cache-success", lambda _: print("  (CACHE HIT!)"))

    query = SlowQuery("select * from users where active = ?", [True])

    async with cache:
        for i in range(1, 4):
            start = time.time()
            rows = await cache.cache(query, ttl=30)
            elapsed = (time.time() - start) * 1000
            print(f"Query {i}: {len(rows)} rows in {elapsed:.1f}ms")
            await cache.drain()

        stats = cache.get_stats()
        print(f"\nCache stats: {stats.hits} hits, {stats.misses} misses")


if __name__ == "__main__":
    asyncio.run(main())
