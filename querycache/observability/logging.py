"""Structured logging configuration for querycache.

Logs are rendered as JSON in production for log aggregators and as
colored console output in development.

Configuration:
    Set via environment variables:
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - LOG_FORMAT: json, console (default: json in production, console in dev)
    - ENVIRONMENT: development, production (affects format default)

Usage:
    >>> from querycache.observability.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("cache_hit", key="knex:3f1c...")
"""

import logging
import sys

import structlog
from structlog.types import Processor

from querycache.core.config import settings

# Module-level flag to track initialization
_configured = False


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
    is_production: bool | None = None,
) -> None:
    """Configure structured logging for the application.

    Safe to call multiple times (subsequent calls are no-ops).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Default from settings.
        log_format: Output format (json, console). Default based on environment.
        is_production: Override production detection. Default from settings.
    """
    global _configured
    if _configured:
        return

    if level is None:
        level = settings.log_level

    if is_production is None:
        is_production = settings.is_production

    if log_format is None:
        log_format = settings.log_format or ("json" if is_production else "console")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Auto-configures logging on first call if not already configured.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog BoundLogger instance.
    """
    if not _configured:
        configure_logging()

    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log calls in this context.

    Example:
        >>> bind_context(request_id="abc123")
        >>> logger.info("cache_miss")  # Includes request_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


class LogEvents:
    """Standard event names for structured logging."""

    # Read path
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    CACHE_GET_ERROR = "cache_get_error"
    CACHE_TIMEOUT = "cache_timeout"

    # Write path
    CACHE_SET_SUCCESS = "cache_set_success"
    CACHE_SET_ERROR = "cache_set_error"

    # Events
    LISTENER_FAILED = "listener_failed"

    # Store lifecycle
    STORE_CONNECTED = "store_connected"
    STORE_CLOSED = "store_closed"
