"""querycache - read-through Redis cache for query results.

Basic usage:
    >>> from querycache import QueryCache, CacheConfig
    >>> cache = QueryCache(CacheConfig(url="redis://localhost:6379"))
    >>> rows = await cache.cache(query, ttl=60)
"""

from dotenv import load_dotenv

load_dotenv()

from querycache.cache import (
    CacheConfig,
    CacheEvent,
    CacheStats,
    CacheWrite,
    QueryCache,
    RedisStore,
    generate_cache_key,
)
from querycache.core import (
    CacheTimeoutError,
    EncodeError,
    InvalidQueryError,
    InvalidTimeoutError,
    InvalidTtlError,
    QueryCacheError,
    StoreError,
    ValidationError,
    settings,
)

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "QueryCache",
    "RedisStore",
    "generate_cache_key",
    # Models
    "CacheConfig",
    "CacheEvent",
    "CacheStats",
    "CacheWrite",
    # Configuration
    "settings",
    # Exceptions
    "QueryCacheError",
    "ValidationError",
    "InvalidQueryError",
    "InvalidTtlError",
    "InvalidTimeoutError",
    "StoreError",
    "CacheTimeoutError",
    "EncodeError",
    # Version
    "__version__",
]
