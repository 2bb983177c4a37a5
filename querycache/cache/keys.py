"""Cache key derivation from query descriptors.

A query descriptor is any object exposing ``to_sql()`` plus an execution
form (an ``execute()`` coroutine method, or being awaitable itself). The
serialization is hashed into a fixed-length, namespaced key:

    {prefix}:{md5(command_text + ":" + canonical_json(parameters))}

JSON-native parameters hash as themselves. Mappings with non-string keys,
sets and other types are tagged, so a ``Decimal("1.5")`` binding never
shares a key with the string ``"1.5"``.
"""

import hashlib
import inspect
import json
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic_core import PydanticSerializationError, to_jsonable_python

from querycache.cache.models import SerializedQuery
from querycache.core.exceptions import InvalidQueryError

DEFAULT_KEY_PREFIX = "knex"


@runtime_checkable
class QueryDescriptor(Protocol):
    """Serializable, executable query supplied by the caller."""

    def to_sql(self) -> Any:
        """Return the (sql, bindings) serialization of this query."""
        ...


def serialize_query(query: Any) -> SerializedQuery:
    """Normalize a descriptor's ``to_sql()`` output.

    Accepted shapes are a SerializedQuery, a ``(sql, bindings)`` tuple, a
    mapping with ``sql`` and ``bindings`` keys, or an object with ``sql``
    and ``bindings`` attributes.

    Args:
        query: Query descriptor

    Returns:
        SerializedQuery with command text and ordered parameters

    Raises:
        InvalidQueryError: If the descriptor cannot be serialized
    """
    to_sql = getattr(query, "to_sql", None)
    if query is None or not callable(to_sql):
        raise InvalidQueryError(
            "Not a valid query object: missing to_sql()",
            details={"type": type(query).__name__},
        )

    raw = to_sql()
    if isinstance(raw, SerializedQuery):
        return raw

    if isinstance(raw, tuple) and len(raw) == 2:
        sql, bindings = raw
    elif isinstance(raw, Mapping):
        if "sql" not in raw or "bindings" not in raw:
            raise InvalidQueryError("Not a valid query object: to_sql() missing keys")
        sql, bindings = raw["sql"], raw["bindings"]
    elif hasattr(raw, "sql") and hasattr(raw, "bindings"):
        sql, bindings = raw.sql, raw.bindings
    else:
        raise InvalidQueryError(
            "Not a valid query object: unsupported to_sql() result",
            details={"type": type(raw).__name__},
        )

    if not isinstance(sql, str) or not isinstance(bindings, (list, tuple)):
        raise InvalidQueryError(
            "Not a valid query object: sql must be str and bindings a sequence"
        )

    return SerializedQuery(command_text=sql, parameters=list(bindings))


def is_executable(query: Any) -> bool:
    """Check whether a descriptor can be executed."""
    return callable(getattr(query, "execute", None)) or inspect.isawaitable(query)


def validate_query(query: Any) -> SerializedQuery:
    """Validate a descriptor and return its serialization.

    Raises:
        InvalidQueryError: If the descriptor is not serializable or executable
    """
    serialized = serialize_query(query)
    if not is_executable(query):
        raise InvalidQueryError(
            "Not a valid query object: not awaitable and no execute()",
            details={"type": type(query).__name__},
        )
    return serialized


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def canonical_parameter(value: Any) -> Any:
    """Convert a binding into a JSON-native form with a total ordering.

    Raises:
        InvalidQueryError: If the value has no JSON representation
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [canonical_parameter(item) for item in value]
    if isinstance(value, Mapping):
        if all(isinstance(k, str) for k in value):
            return {k: canonical_parameter(v) for k, v in value.items()}
        pairs = [
            [canonical_parameter(k), canonical_parameter(v)] for k, v in value.items()
        ]
        return {"$map": sorted(pairs, key=_dumps)}
    if isinstance(value, (set, frozenset)):
        return {"$set": sorted((canonical_parameter(v) for v in value), key=_dumps)}

    try:
        plain = to_jsonable_python(value, bytes_mode="base64")
    except PydanticSerializationError as e:
        raise InvalidQueryError(
            f"Not a valid query object: unsupported binding type {type(value).__name__}",
            details={"type": type(value).__name__},
        ) from e
    return {f"${type(value).__name__}": canonical_parameter(plain)}


def derive_key(serialized: SerializedQuery, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Derive a namespaced cache key from a serialized query.

    Args:
        serialized: Serialized query
        prefix: Key namespace

    Returns:
        Cache key of the form ``{prefix}:{32 hex chars}``

    Raises:
        InvalidQueryError: If a binding cannot be canonicalized
    """
    params = _dumps(canonical_parameter(serialized.parameters))
    query_string = f"{serialized.command_text}:{params}"
    digest = hashlib.md5(query_string.encode("utf-8"), usedforsecurity=False)
    return f"{prefix}:{digest.hexdigest()}"


def generate_cache_key(query: Any, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Serialize a descriptor and derive its cache key."""
    return derive_key(serialize_query(query), prefix)
