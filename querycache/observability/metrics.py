"""OpenTelemetry metrics for the query cache.

Metrics:
    - querycache.cache.hits: Counter of reads served from the store
    - querycache.cache.misses: Counter of reads that fell through to the query
    - querycache.cache.errors: Counter of store failures by operation and reason

Instruments are no-ops unless a MeterProvider is installed and
``settings.otel_enabled`` is set.
"""

from opentelemetry import metrics

from querycache.core.config import settings

_meter: metrics.Meter | None = None

_cache_hits_counter: metrics.Counter | None = None
_cache_misses_counter: metrics.Counter | None = None
_cache_errors_counter: metrics.Counter | None = None


def get_meter(name: str = "querycache") -> metrics.Meter:
    """Get OpenTelemetry meter instance.

    Args:
        name: Meter name

    Returns:
        Meter instance (no-op if telemetry disabled)
    """
    global _meter
    if _meter is None:
        _meter = metrics.get_meter(name)
    return _meter


def _enabled() -> bool:
    return settings.otel_enabled and settings.otel_metrics_enabled


def _ensure_instruments() -> None:
    """Lazy initialization of metric instruments."""
    global _cache_hits_counter
    global _cache_misses_counter
    global _cache_errors_counter

    meter = get_meter()

    if _cache_hits_counter is None:
        _cache_hits_counter = meter.create_counter(
            name="querycache.cache.hits",
            description="Number of cache hits",
            unit="1",
        )

    if _cache_misses_counter is None:
        _cache_misses_counter = meter.create_counter(
            name="querycache.cache.misses",
            description="Number of cache misses",
            unit="1",
        )

    if _cache_errors_counter is None:
        _cache_errors_counter = meter.create_counter(
            name="querycache.cache.errors",
            description="Number of failed store operations",
            unit="1",
        )


def record_cache_hit() -> None:
    """Record cache hit metric."""
    if not _enabled():
        return

    _ensure_instruments()

    if _cache_hits_counter:
        _cache_hits_counter.add(1)


def record_cache_miss() -> None:
    """Record cache miss metric."""
    if not _enabled():
        return

    _ensure_instruments()

    if _cache_misses_counter:
        _cache_misses_counter.add(1)


def record_cache_error(operation: str, reason: str) -> None:
    """Record a failed store operation.

    Args:
        operation: "get" or "set"
        reason: "timeout", "store" or "encode"
    """
    if not _enabled():
        return

    _ensure_instruments()

    if _cache_errors_counter:
        _cache_errors_counter.add(1, {"operation": operation, "reason": reason})
