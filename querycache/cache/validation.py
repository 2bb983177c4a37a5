"""Argument validation for QueryCache.cache().

Both validators run before any store interaction.
"""

import math
from typing import Any

from querycache.core.exceptions import InvalidTimeoutError, InvalidTtlError


def validate_ttl(ttl: Any) -> int | None:
    """Validate and normalize a TTL in seconds.

    Args:
        ttl: Seconds until expiry. 0 means no expiry. Numeric strings
            such as "60" are accepted.

    Returns:
        Positive integer TTL, or None for no expiry

    Raises:
        InvalidTtlError: If ttl is None, negative, or not an integer number
    """
    if ttl is None:
        raise InvalidTtlError('TTL is required. If no TTL then pass "0"')

    value = ttl
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise InvalidTtlError("Not a valid TTL", details={"ttl": ttl}) from None

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidTtlError("Not a valid TTL", details={"ttl": ttl})

    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidTtlError(
                "TTL must be a whole number of seconds", details={"ttl": ttl}
            )
        value = int(value)

    if value < 0:
        raise InvalidTtlError("TTL must not be negative", details={"ttl": ttl})

    return value or None


def validate_timeout(timeout_ms: Any, default: int) -> int | float:
    """Validate a read timeout in milliseconds.

    Args:
        timeout_ms: Maximum wait for a store read, or None for the default
        default: Configured default timeout

    Raises:
        InvalidTimeoutError: If timeout_ms is not a positive number
    """
    if timeout_ms is None:
        return default

    if (
        isinstance(timeout_ms, bool)
        or not isinstance(timeout_ms, (int, float))
        or not math.isfinite(timeout_ms)
        or timeout_ms <= 0
    ):
        raise InvalidTimeoutError(
            "Timeout must be a positive number of milliseconds",
            details={"timeout_ms": timeout_ms},
        )

    return timeout_ms
