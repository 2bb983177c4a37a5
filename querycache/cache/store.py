"""Redis store adapter with value encoding.

Strings are written verbatim as UTF-8. Every other value is written as a
one-byte marker followed by a MessagePack payload. The marker byte (0xFF)
never occurs in UTF-8 text, so a verbatim string can never be mistaken
for a structured value on read: ``"42"`` reads back as ``"42"`` while
``42`` reads back as ``42``.
"""

from typing import Any, Protocol

import msgpack
from msgpack.exceptions import UnpackException
from pydantic_core import PydanticSerializationError, to_jsonable_python
from redis.asyncio import Redis
from redis.exceptions import RedisError

from querycache.cache.models import CacheConfig, CacheWrite
from querycache.core.exceptions import EncodeError, StoreError
from querycache.observability.logging import LogEvents, get_logger

logger = get_logger(__name__)

STRUCTURED_MARKER = b"\xff"


class CacheStore(Protocol):
    """Minimal key-value store used by QueryCache."""

    async def get(self, key: str) -> Any | None:
        """Return the decoded value for key, or None if absent."""
        ...

    async def set(self, key: str, value: Any, ttl: int | None) -> CacheWrite:
        """Write value under key, expiring after ttl seconds when ttl > 0."""
        ...


def _pack_default(obj: Any) -> Any:
    # Same conversion as model_dump(mode="json"): ISO datetimes, str Decimal/UUID
    try:
        return to_jsonable_python(obj)
    except PydanticSerializationError as e:
        raise TypeError(f"Cannot serialize object of type {type(obj).__name__}") from e


def encode_value(value: Any) -> bytes:
    """Encode a value for storage.

    Raises:
        EncodeError: If a non-string value cannot be serialized
    """
    if isinstance(value, str):
        return value.encode("utf-8")

    try:
        payload = msgpack.packb(value, use_bin_type=True, default=_pack_default)
    except (TypeError, ValueError, OverflowError) as e:
        raise EncodeError(
            f"Value is not serializable: {e}",
            details={"type": type(value).__name__},
        ) from e
    return STRUCTURED_MARKER + payload


def decode_value(raw: bytes | str | None) -> Any:
    """Decode a stored value.

    Structured payloads are unpacked. Anything else is returned as text
    (or bytes, when not valid UTF-8). Decode failure is not an error.
    """
    if raw is None or isinstance(raw, str):
        return raw

    if raw.startswith(STRUCTURED_MARKER):
        try:
            return msgpack.unpackb(raw[1:], raw=False, strict_map_key=False)
        except (ValueError, UnpackException):
            pass

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw


class RedisStore:
    """CacheStore backed by redis.asyncio.

    Transport and protocol failures are raised as StoreError. Callers
    decide whether a failure is fatal; QueryCache never lets it reach
    the query path.
    """

    def __init__(self, client: "Redis[bytes]"):
        """Initialize store adapter.

        Args:
            client: Redis client created with decode_responses=False
        """
        self.redis = client

    @classmethod
    def from_config(cls, config: CacheConfig) -> "RedisStore":
        """Create a store from cache configuration.

        A URL takes precedence over host and port. The password, when
        set, is sent as the AUTH credential.
        """
        options: dict[str, Any] = {
            "db": config.db,
            "socket_timeout": config.socket_timeout,
            "decode_responses": False,
        }
        if config.password:
            options["password"] = config.password

        if config.url:
            client = Redis.from_url(config.url, **options)
            logger.info(LogEvents.STORE_CONNECTED, url=config.url)
        else:
            client = Redis(host=config.host, port=config.port, **options)
            logger.info(LogEvents.STORE_CONNECTED, host=config.host, port=config.port)

        return cls(client)

    async def get(self, key: str) -> Any | None:
        """Read and decode a value.

        Raises:
            StoreError: On transport or protocol failure
        """
        try:
            data = await self.redis.get(key)
        except (RedisError, OSError) as e:
            raise StoreError(f"Cache read failed: {e}", details={"key": key}) from e
        return decode_value(data)

    async def set(self, key: str, value: Any, ttl: int | None) -> CacheWrite:
        """Encode and write a value, with expiry when ttl is positive.

        Returns:
            CacheWrite describing the arguments used for the write

        Raises:
            EncodeError: If the value cannot be serialized
            StoreError: On transport or protocol failure
        """
        data = encode_value(value)
        ttl = ttl if ttl and ttl > 0 else None

        try:
            if ttl:
                await self.redis.set(key, data, ex=ttl)
            else:
                await self.redis.set(key, data)
        except (RedisError, OSError) as e:
            raise StoreError(f"Cache write failed: {e}", details={"key": key}) from e

        return CacheWrite(key=key, value=data, ttl=ttl)

    async def ping(self) -> bool:
        """Check connectivity.

        Raises:
            StoreError: If the server cannot be reached
        """
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError) as e:
            raise StoreError(f"Cache ping failed: {e}") from e

    async def close(self) -> None:
        """Close Redis connection gracefully."""
        await self.redis.aclose()
        logger.info(LogEvents.STORE_CLOSED)
