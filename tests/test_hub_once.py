from __future__ import annotations

import pytest

from eventhub import EventHub


def test_once_listener_fires_only_once():
    hub = EventHub()
    calls = []
    hub.once("event", calls.append)

    assert hub.emit("event", 1) is True
    assert hub.emit("event", 2) is False
    assert hub.emit("event", 3) is False

    assert calls == [1]
    assert "event" not in hub.events


def test_once_handle_is_safe_after_auto_removal():
    hub = EventHub()
    calls = []
    unbind = hub.once("event", calls.append)
    hub.on("event", calls.append)

    hub.emit("event", "a")
    assert unbind.active is False

    unbind()
    unbind()
    hub.emit("event", "b")

    assert calls == ["a", "a", "b"]
    assert len(hub.events["event"]) == 1


def test_once_listener_can_be_unbound_before_firing():
    hub = EventHub()
    calls = []
    unbind = hub.once("event", calls.append)

    unbind()

    assert hub.emit("event", 1) is False
    assert calls == []


def test_once_listener_does_not_stop_later_listeners():
    hub = EventHub()
    order = []
    hub.on("event", lambda: order.append("first"))
    hub.once("event", lambda: order.append("once"))
    hub.on("event", lambda: order.append("last"))

    hub.emit("event")
    hub.emit("event")

    assert order == ["first", "once", "last", "first", "last"]


def test_once_listener_reemitting_its_event_runs_once():
    hub = EventHub()
    calls = []

    def listener(depth):
        calls.append(depth)
        hub.emit("event", depth + 1)

    hub.once("event", listener)
    hub.emit("event", 0)

    assert calls == [0]


def test_once_listener_is_removed_even_when_it_raises():
    hub = EventHub()

    def boom():
        raise ValueError("nope")

    hub.once("event", boom)

    with pytest.raises(ValueError):
        hub.emit("event")

    assert hub.emit("event") is False


def test_once_listener_is_unregistered_while_running():
    hub = EventHub()
    seen = []

    def listener():
        seen.append(hub.listeners("event"))

    def other():
        pass

    hub.once("event", listener)
    hub.on("event", other)
    hub.emit("event")

    assert seen == [(other,)]
