"""Cache-aside orchestration for query descriptors."""

import asyncio
import inspect
from typing import Any

from querycache.cache.events import CacheEvents, Listener
from querycache.cache.keys import derive_key, validate_query
from querycache.cache.lookup import bounded_get
from querycache.cache.models import CacheConfig, CacheEvent, CacheStats
from querycache.cache.store import CacheStore, RedisStore
from querycache.cache.validation import validate_timeout, validate_ttl
from querycache.core.exceptions import EncodeError
from querycache.observability.logging import LogEvents, get_logger
from querycache.observability.metrics import (
    record_cache_error,
    record_cache_hit,
    record_cache_miss,
)

logger = get_logger(__name__)


async def execute_query(query: Any) -> Any:
    """Run a descriptor's execution form and return its result."""
    execute = getattr(query, "execute", None)
    if callable(execute):
        result = execute()
        if inspect.isawaitable(result):
            result = await result
        return result
    return await query


class QueryCache:
    """Read-through cache for query results.

    Per call:
        1. Validate the descriptor, TTL and timeout (raises before any I/O)
        2. Derive the cache key from the query serialization
        3. Race a store read against the timeout
        4. Hit: emit get-cache-success and return the cached value
        5. Miss, timeout or store error: execute the query, return its
           result and write it back in the background

    Design Philosophy:
        The store is an OPTIONAL optimization. Store failures are only
        visible through events, logs and stats; the caller always gets
        the query result (or the query's own exception).

    Example:
        >>> cache = QueryCache(CacheConfig(url="redis://localhost:6379"))
        >>> cache.on("get-cache-error", lambda err: print(err))
        >>> rows = await cache.cache(query, ttl=60)
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        store: CacheStore | None = None,
        events: CacheEvents | None = None,
    ):
        """Initialize the cache.

        Args:
            config: Cache configuration (defaults to environment settings)
            store: Store adapter (defaults to a RedisStore built from config)
            events: Event sink (defaults to a fresh CacheEvents)
        """
        self.config = config or CacheConfig.from_settings()
        self.key_prefix = self.config.key_prefix
        self.store: CacheStore = (
            store if store is not None else RedisStore.from_config(self.config)
        )
        self.events = events or CacheEvents()
        self.stats = CacheStats()
        self._pending: set[asyncio.Task[None]] = set()

    def on(self, event: CacheEvent | str, listener: Listener) -> Listener:
        """Register a listener for a cache event."""
        return self.events.on(event, listener)

    def once(self, event: CacheEvent | str, listener: Listener) -> Listener:
        """Register a listener for the next emission of a cache event."""
        return self.events.once(event, listener)

    def off(self, event: CacheEvent | str, listener: Listener) -> None:
        """Remove a listener for a cache event."""
        self.events.off(event, listener)

    async def cache(
        self,
        query: Any,
        ttl: int | str | None,
        timeout_ms: int | float | None = None,
    ) -> Any:
        """Return the cached result of a query, executing it on a miss.

        Args:
            query: Descriptor exposing to_sql() and an execution form
            ttl: Expiry in seconds. Required; pass 0 for no expiry.
            timeout_ms: Maximum wait for the store read (default from config)

        Returns:
            Cached value on a hit, otherwise the query result

        Raises:
            InvalidQueryError: If the descriptor is malformed
            InvalidTtlError: If ttl is missing or invalid
            InvalidTimeoutError: If timeout_ms is not positive
            Exception: Whatever the query itself raises on a miss
        """
        serialized = validate_query(query)
        expiry = validate_ttl(ttl)
        timeout = validate_timeout(timeout_ms, self.config.timeout_ms)
        key = derive_key(serialized, self.key_prefix)

        cached = await bounded_get(self.store, key, timeout, self.events, self.stats)
        if cached is not None:
            self.stats.hits += 1
            self.stats.update_hit_rate()
            record_cache_hit()
            logger.debug(LogEvents.CACHE_HIT, key=key)
            self.events.emit(CacheEvent.GET_SUCCESS, cached)
            return cached

        self.stats.misses += 1
        self.stats.update_hit_rate()
        record_cache_miss()
        logger.debug(LogEvents.CACHE_MISS, key=key)

        result = await execute_query(query)
        self._schedule_write(key, result, expiry)
        return result

    def _schedule_write(self, key: str, value: Any, ttl: int | None) -> None:
        task = asyncio.create_task(self._write(key, value, ttl))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, key: str, value: Any, ttl: int | None) -> None:
        """Write a result back to the store and emit the outcome.

        Note:
            Runs detached from the caller; every failure is reported as
            set-cache-error and never raised.
        """
        try:
            write = await self.store.set(key, value, ttl)

        except Exception as e:
            reason = "encode" if isinstance(e, EncodeError) else "store"
            logger.warning(
                LogEvents.CACHE_SET_ERROR, key=key, reason=reason, error=str(e)
            )
            record_cache_error("set", reason)
            self.stats.set_errors += 1
            self.events.emit(CacheEvent.SET_ERROR, e)

        else:
            self.stats.set_successes += 1
            logger.debug(LogEvents.CACHE_SET_SUCCESS, key=key, ttl=ttl)
            self.events.emit(CacheEvent.SET_SUCCESS, write)

    @property
    def pending_writes(self) -> int:
        """Number of background writes not yet finished."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for all background writes to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def get_stats(self) -> CacheStats:
        """Get current cache statistics."""
        self.stats.update_hit_rate()
        return self.stats

    async def close(self) -> None:
        """Finish pending writes and close the store."""
        await self.drain()
        close = getattr(self.store, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "QueryCache":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
