"""Cache configuration, event and statistics models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from querycache.core.config import Settings, settings


class CacheEvent(str, Enum):
    """Lifecycle events emitted by QueryCache.

    Events are an observability side channel. They never change what
    the caller receives.
    """

    GET_SUCCESS = "get-cache-success"
    GET_ERROR = "get-cache-error"
    SET_SUCCESS = "set-cache-success"
    SET_ERROR = "set-cache-error"


class SerializedQuery(BaseModel):
    """Deterministic serialization of a query descriptor.

    Attributes:
        command_text: Raw SQL (or other command) text
        parameters: Ordered positional bindings
    """

    command_text: str = Field(..., description="Command text")
    parameters: list[Any] = Field(
        default_factory=list, description="Ordered positional bindings"
    )


@dataclass(frozen=True)
class CacheWrite:
    """Arguments used for a store write, emitted with set-cache-success."""

    key: str
    value: bytes
    ttl: int | None = None


class CacheConfig(BaseModel):
    """Configuration for a QueryCache instance.

    Attributes:
        host: Redis host, used when url is empty
        port: Redis port, used when url is empty
        url: Redis connection URL, takes precedence over host/port
        password: Optional auth credential
        db: Redis database index
        key_prefix: Namespace prefix for cache keys
        timeout_ms: Default maximum wait for a cache read in milliseconds
        socket_timeout: Redis socket timeout in seconds (None = no limit)
    """

    host: str = Field(default="127.0.0.1", description="Redis host")
    port: int = Field(default=6379, description="Redis port", ge=1, le=65535)
    url: str | None = Field(default=None, description="Redis connection URL")
    password: str | None = Field(default=None, description="Redis auth credential")
    db: int = Field(default=0, description="Redis database index", ge=0)
    key_prefix: str = Field(
        default="knex", description="Cache key namespace prefix", min_length=1
    )
    timeout_ms: int = Field(
        default=10000, description="Default cache read timeout (ms)", gt=0
    )
    socket_timeout: float | None = Field(
        default=None, description="Redis socket timeout (seconds)"
    )

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "CacheConfig":
        """Build configuration from environment settings.

        Args:
            source: Settings instance (defaults to module-level settings)

        Returns:
            CacheConfig populated from settings
        """
        source = source or settings
        return cls(
            host=source.redis_host,
            port=source.redis_port,
            url=source.redis_url or None,
            password=source.redis_password or None,
            db=source.redis_db,
            key_prefix=source.cache_key_prefix,
            timeout_ms=source.cache_timeout_ms,
            socket_timeout=source.redis_socket_timeout,
        )


class CacheStats(BaseModel):
    """Cache performance statistics.

    Attributes:
        hits: Reads served from the store
        misses: Reads that fell through to query execution
        get_errors: Store read failures (including timeouts)
        timeouts: Store reads that exceeded the timeout budget
        set_successes: Completed background writes
        set_errors: Failed background writes
        hit_rate: Cache hit rate percentage
    """

    hits: int = Field(default=0, description="Cache hits")
    misses: int = Field(default=0, description="Cache misses")
    get_errors: int = Field(default=0, description="Store read errors")
    timeouts: int = Field(default=0, description="Store read timeouts")
    set_successes: int = Field(default=0, description="Successful writes")
    set_errors: int = Field(default=0, description="Failed writes")
    hit_rate: float = Field(default=0.0, description="Hit rate percentage")

    def update_hit_rate(self) -> None:
        """Recalculate hit rate based on current stats."""
        total = self.hits + self.misses
        self.hit_rate = (self.hits / total * 100) if total > 0 else 0.0
