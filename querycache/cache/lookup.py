"""Store reads bounded by a timeout budget."""

import asyncio
from typing import Any

from querycache.cache.events import CacheEvents
from querycache.cache.models import CacheEvent, CacheStats
from querycache.cache.store import CacheStore
from querycache.core.exceptions import CacheTimeoutError
from querycache.observability.logging import LogEvents, get_logger
from querycache.observability.metrics import record_cache_error

logger = get_logger(__name__)


async def bounded_get(
    store: CacheStore,
    key: str,
    timeout_ms: int,
    events: CacheEvents,
    stats: CacheStats | None = None,
) -> Any | None:
    """Read a key, giving up after timeout_ms milliseconds.

    The store read races a timer. If the timer wins, the pending read is
    cancelled and awaited, so its outcome is discarded rather than
    surfacing later as an unobserved exception.

    Args:
        store: Store to read from
        key: Cache key
        timeout_ms: Maximum wait in milliseconds
        events: Sink for get-cache-error emissions
        stats: Optional counters updated on timeout or failure

    Returns:
        The stored value, or None on a miss, timeout or store failure

    Note:
        Never raises store failures. Timeouts and errors are emitted as
        get-cache-error and reported as a miss.
    """
    try:
        return await asyncio.wait_for(store.get(key), timeout=timeout_ms / 1000)

    except asyncio.TimeoutError:
        error = CacheTimeoutError(
            f"Get data from cache timeout {timeout_ms}ms",
            details={"key": key, "timeout_ms": timeout_ms},
        )
        logger.warning(LogEvents.CACHE_TIMEOUT, key=key, timeout_ms=timeout_ms)
        record_cache_error("get", "timeout")
        if stats is not None:
            stats.get_errors += 1
            stats.timeouts += 1
        events.emit(CacheEvent.GET_ERROR, error)
        return None

    except Exception as e:
        logger.warning(LogEvents.CACHE_GET_ERROR, key=key, error=str(e))
        record_cache_error("get", "store")
        if stats is not None:
            stats.get_errors += 1
        events.emit(CacheEvent.GET_ERROR, e)
        return None
