"""Core infrastructure for querycache."""

from querycache.core.config import Settings, settings
from querycache.core.exceptions import (
    CacheTimeoutError,
    EncodeError,
    InvalidQueryError,
    InvalidTimeoutError,
    InvalidTtlError,
    QueryCacheError,
    StoreError,
    ValidationError,
)

__all__ = [
    # Config
    "Settings",
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
]
