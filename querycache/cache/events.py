"""Listener registry for cache lifecycle events.

Each QueryCache owns one CacheEvents instance. Listeners are plain
callables receiving the event payload:

    >>> cache.on("get-cache-error", lambda err: print(err))
    >>> cache.on(CacheEvent.SET_SUCCESS, lambda write: print(write.key))
"""

from collections.abc import Callable
from typing import Any

from querycache.cache.models import CacheEvent
from querycache.observability.logging import LogEvents, get_logger

logger = get_logger(__name__)

Listener = Callable[[Any], Any]


def _as_event(event: CacheEvent | str) -> CacheEvent:
    try:
        return CacheEvent(event)
    except ValueError:
        raise ValueError(f"Unknown cache event: {event!r}") from None


class CacheEvents:
    """Observer registry for CacheEvent emissions.

    Emission is synchronous and in registration order. A listener that
    raises is logged and skipped so monitoring code can never break the
    query path.
    """

    def __init__(self) -> None:
        self._listeners: dict[CacheEvent, list[tuple[Listener, bool]]] = {
            event: [] for event in CacheEvent
        }

    def on(self, event: CacheEvent | str, listener: Listener) -> Listener:
        """Register a listener for every emission of an event.

        Returns:
            The registered listener
        """
        self._listeners[_as_event(event)].append((listener, False))
        return listener

    def once(self, event: CacheEvent | str, listener: Listener) -> Listener:
        """Register a listener removed after its first call."""
        self._listeners[_as_event(event)].append((listener, True))
        return listener

    def off(self, event: CacheEvent | str, listener: Listener) -> None:
        """Remove every registration of a listener for an event."""
        name = _as_event(event)
        self._listeners[name] = [
            entry for entry in self._listeners[name] if entry[0] != listener
        ]

    def listener_count(self, event: CacheEvent | str) -> int:
        """Number of listeners registered for an event."""
        return len(self._listeners[_as_event(event)])

    def emit(self, event: CacheEvent | str, payload: Any = None) -> None:
        """Call every listener for an event with the payload."""
        name = _as_event(event)
        entries = list(self._listeners[name])
        if any(once for _, once in entries):
            self._listeners[name] = [entry for entry in entries if not entry[1]]

        for listener, _ in entries:
            try:
                listener(payload)
            except Exception as e:
                logger.warning(
                    LogEvents.LISTENER_FAILED,
                    cache_event=name.value,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e),
                )
