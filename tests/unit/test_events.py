"""Unit tests for the cache event registry."""

import pytest

from querycache.cache.events import CacheEvents
from querycache.cache.models import CacheEvent


class TestCacheEvents:
    """Tests for CacheEvents."""

    def test_emit_calls_listener_with_payload(self):
        """Test listeners receive the emitted payload."""
        events = CacheEvents()
        received = []
        events.on(CacheEvent.SET_ERROR, received.append)

        events.emit(CacheEvent.SET_ERROR, "payload")

        assert received == ["payload"]

    def test_string_event_names(self):
        """Test wire names and enum members are interchangeable."""
        events = CacheEvents()
        received = []
        events.on("get-cache-success", received.append)

        events.emit(CacheEvent.GET_SUCCESS, 1)

        assert received == [1]
        assert events.listener_count(CacheEvent.GET_SUCCESS) == 1

    def test_unknown_event_rejected(self):
        """Test unknown event names raise ValueError."""
        events = CacheEvents()

        with pytest.raises(ValueError, match="Unknown cache event"):
            events.on("cache-evicted", print)

    def test_listeners_called_in_order(self):
        """Test listeners run in registration order."""
        events = CacheEvents()
        calls = []
        events.on(CacheEvent.GET_ERROR, lambda _: calls.append("first"))
        events.on(CacheEvent.GET_ERROR, lambda _: calls.append("second"))

        events.emit(CacheEvent.GET_ERROR)

        assert calls == ["first", "second"]

    def test_events_are_isolated(self):
        """Test emitting one event does not call listeners of another."""
        events = CacheEvents()
        calls = []
        events.on(CacheEvent.SET_SUCCESS, calls.append)

        events.emit(CacheEvent.SET_ERROR, "x")

        assert calls == []

    def test_once(self):
        """Test once listeners fire a single time."""
        events = CacheEvents()
        calls = []
        events.once(CacheEvent.GET_SUCCESS, calls.append)

        events.emit(CacheEvent.GET_SUCCESS, 1)
        events.emit(CacheEvent.GET_SUCCESS, 2)

        assert calls == [1]
        assert events.listener_count(CacheEvent.GET_SUCCESS) == 0

    def test_off(self):
        """Test removed listeners are no longer called."""
        events = CacheEvents()
        calls = []
        events.on(CacheEvent.SET_SUCCESS, calls.append)
        events.off(CacheEvent.SET_SUCCESS, calls.append)

        events.emit(CacheEvent.SET_SUCCESS, 1)

        assert calls == []

    def test_failing_listener_isolated(self):
        """Test a raising listener does not stop emission or propagate."""
        events = CacheEvents()
        calls = []

        def broken(_):
            raise RuntimeError("listener bug")

        events.on(CacheEvent.GET_ERROR, broken)
        events.on(CacheEvent.GET_ERROR, calls.append)

        events.emit(CacheEvent.GET_ERROR, "err")

        assert calls == ["err"]

    def test_emit_without_listeners(self):
        """Test emitting with no listeners is a no-op."""
        CacheEvents().emit(CacheEvent.SET_SUCCESS)

    def test_listener_added_during_emit_waits_for_next_emission(self):
        """Test a listener registered mid-emission is not called by that emission."""
        events = CacheEvents()
        late = []

        def register(_):
            events.on(CacheEvent.GET_SUCCESS, late.append)

        events.on(CacheEvent.GET_SUCCESS, register)

        events.emit(CacheEvent.GET_SUCCESS, "first")
        assert late == []

        events.emit(CacheEvent.GET_SUCCESS, "second")
        assert late == ["second"]
