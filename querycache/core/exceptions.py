"""Exception hierarchy for the query cache.

Validation errors are raised to the caller before any store I/O. Store,
timeout and encode errors are caught at the cache boundary and only
surfaced through cache events.
"""

from typing import Any


class QueryCacheError(Exception):
    """Base exception for all querycache errors."""

    code: str = "QUERYCACHE_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(QueryCacheError):
    """Input validation failed before any store interaction."""

    code: str = "VALIDATION_ERROR"


class InvalidQueryError(ValidationError):
    """Query descriptor has no usable serialization or execution form."""

    code: str = "INVALID_QUERY"


class InvalidTtlError(ValidationError):
    """TTL is missing, negative or not an integer number of seconds."""

    code: str = "INVALID_TTL"


class InvalidTimeoutError(ValidationError):
    """Read timeout is not a positive number of milliseconds."""

    code: str = "INVALID_TIMEOUT"


class StoreError(QueryCacheError):
    """Store operation failed (connection, protocol, response)."""

    code: str = "STORE_ERROR"


class CacheTimeoutError(QueryCacheError):
    """Store read did not complete within the timeout budget."""

    code: str = "CACHE_TIMEOUT"


class EncodeError(QueryCacheError):
    """Value could not be serialized for storage."""

    code: str = "ENCODE_ERROR"
