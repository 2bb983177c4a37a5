"""Read-through caching layer for query results.

Query results are stored in Redis under a key derived from the query's
serialization. Reads are bounded by a timeout and every store failure
degrades to executing the query directly.

Key Features:
    - Deterministic MD5 keys namespaced by prefix ("knex:<hash>")
    - Bounded store reads (default 10000 ms)
    - Fire-and-forget write-back with optional TTL
    - Lifecycle events for monitoring (get/set success and error)

Usage:
    >>> from querycache.cache import CacheConfig, QueryCache
    >>>
    >>> cache = QueryCache(CacheConfig(host="127.0.0.1", port=6379))
    >>> cache.on("set-cache-error", lambda err: print("write failed", err))
    >>>
    >>> rows = await cache.cache(query, ttl=300, timeout_ms=500)
"""

from querycache.cache.events import CacheEvents
from querycache.cache.keys import (
    QueryDescriptor,
    derive_key,
    generate_cache_key,
    serialize_query,
    validate_query,
)
from querycache.cache.lookup import bounded_get
from querycache.cache.models import (
    CacheConfig,
    CacheEvent,
    CacheStats,
    CacheWrite,
    SerializedQuery,
)
from querycache.cache.service import QueryCache
from querycache.cache.store import CacheStore, RedisStore, decode_value, encode_value
from querycache.cache.validation import validate_timeout, validate_ttl

__all__ = [
    "QueryCache",
    "CacheConfig",
    "CacheEvent",
    "CacheEvents",
    "CacheStats",
    "CacheWrite",
    "CacheStore",
    "RedisStore",
    "QueryDescriptor",
    "SerializedQuery",
    "bounded_get",
    "derive_key",
    "generate_cache_key",
    "serialize_query",
    "validate_query",
    "validate_ttl",
    "validate_timeout",
    "encode_value",
    "decode_value",
]
