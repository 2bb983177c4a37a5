"""Logging and metrics for querycache."""

from querycache.observability.logging import (
    LogEvents,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from querycache.observability.metrics import (
    get_meter,
    record_cache_error,
    record_cache_hit,
    record_cache_miss,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "LogEvents",
    "get_meter",
    "record_cache_hit",
    "record_cache_miss",
    "record_cache_error",
]
