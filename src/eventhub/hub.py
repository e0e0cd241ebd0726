"""
A minimal, synchronous event hub.

Listeners are invoked in registration order on the caller's stack. Nothing is
caught: an exception raised by a listener stops the dispatch and reaches the
caller of emit(). There is no locking; share a hub between threads only with
external synchronization.
"""

from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from . import settings as _settings
from .errors import InvalidListenerError

logger = logging.getLogger(__name__)


Listener = Callable[..., Any]


class ListenerRecord:
    """A registered callback and its registration flags."""

    __slots__ = ("callback", "once", "removed", "__weakref__")

    def __init__(self, callback: Listener, once: bool = False) -> None:
        self.callback = callback
        self.once = once
        self.removed = False

    def __repr__(self) -> str:
        name = getattr(self.callback, "__qualname__", repr(self.callback))
        flags = (" once" if self.once else "") + (" removed" if self.removed else "")
        return f"<ListenerRecord {name}{flags}>"


class Unbind:
    """Removes one listener registration when called.

    Calling it more than once, after a once-listener already fired, or after
    the hub was garbage collected is a no-op. Only weak references are kept,
    so a handle never extends the life of the hub or of the record.
    """

    __slots__ = ("_hub", "_event", "_record")

    def __init__(self, hub: "EventHub", event: str, record: ListenerRecord) -> None:
        self._hub = weakref.ref(hub)
        self._event = event
        self._record = weakref.ref(record)

    @property
    def event(self) -> str:
        return self._event

    @property
    def active(self) -> bool:
        """True while the listener is still registered."""
        record = self._record()
        return record is not None and not record.removed and self._hub() is not None

    def __call__(self) -> None:
        hub = self._hub()
        record = self._record()
        if hub is None or record is None:
            return
        hub._remove(self._event, record)

    def __repr__(self) -> str:
        return f"<Unbind event={self._event!r} active={self.active}>"


class EventHub:
    """Registry of named events to ordered listeners, with synchronous dispatch.

    Example of a host object embedding a hub:

        class Ticker:
            def __init__(self) -> None:
                self.events = EventHub()

            def on(self, event, cb):
                return self.events.on(event, cb)

            def tick(self) -> None:
                self.events.emit("tick")

    Args:
        listeners: Optional mapping of event name to callables, registered in
            the given order as regular (non-once) listeners.
        production: Skip the callable check in on()/once(). None defers to
            ``eventhub.settings.SETTINGS.production_mode``.
    """

    def __init__(
        self,
        listeners: Optional[Mapping[str, Sequence[Listener]]] = None,
        *,
        production: Optional[bool] = None,
    ) -> None:
        self._registry: Dict[str, List[ListenerRecord]] = {}
        self._production = production
        for event, callbacks in (listeners or {}).items():
            for cb in callbacks:
                self.on(event, cb)

    @property
    def events(self) -> Dict[str, List[ListenerRecord]]:
        """Event names mapped to their listener records, in dispatch order.

        Only events with at least one listener appear. Treat as read-only.
        """
        return self._registry

    @property
    def production(self) -> bool:
        if self._production is not None:
            return self._production
        return _settings.SETTINGS.production_mode

    def listeners(self, event: str) -> Tuple[Listener, ...]:
        """Return the callbacks registered for ``event``, in dispatch order."""
        return tuple(r.callback for r in self._registry.get(event, ()))

    def on(self, event: str, callback: Listener) -> Unbind:
        """Register ``callback`` for ``event``.

        Returns:
            A zero-argument handle that removes this registration.

        Raises:
            InvalidListenerError: ``callback`` is not callable (skipped in
                production mode).
        """
        return self._add(event, callback, once=False)

    def once(self, event: str, callback: Listener) -> Unbind:
        """Register ``callback`` for the next dispatch of ``event`` only.

        The record is unregistered just before the callback runs, so inside
        the callback ``listeners(event)`` no longer includes it and a nested
        emit of the same event will not call it again.
        """
        return self._add(event, callback, once=True)

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of ``event`` with ``args``.

        The listener list is snapshotted first: listeners added while
        dispatching are not called, listeners removed before their turn are
        skipped.

        Returns:
            True if ``event`` had at least one listener when emit began.
        """
        records = self._registry.get(event)
        if not records:
            logger.debug("Emitting '%s' with no listeners", event)
            return False
        snapshot = list(records)
        logger.debug("Emitting '%s' to %d listeners", event, len(snapshot))
        for record in snapshot:
            if record.removed:
                continue
            if record.once:
                # Drop before calling so a re-entrant emit can't fire it twice
                self._remove(event, record)
            record.callback(*args)
        return True

    def _add(self, event: str, callback: Listener, *, once: bool) -> Unbind:
        if not self.production and not callable(callback):
            raise InvalidListenerError(
                f"Listener for '{event}' must be callable, got {type(callback).__name__}"
            )
        record = ListenerRecord(callback, once=once)
        self._registry.setdefault(event, []).append(record)
        logger.debug(
            "Registered %s%s on '%s'",
            getattr(callback, "__name__", str(callback)),
            " (once)" if once else "",
            event,
        )
        return Unbind(self, event, record)

    def _remove(self, event: str, record: ListenerRecord) -> None:
        if record.removed:
            return
        record.removed = True
        records = self._registry.get(event)
        if records is None:
            return
        for i, candidate in enumerate(records):
            if candidate is record:
                del records[i]
                break
        if not records:
            del self._registry[event]
        logger.debug(
            "Unbound %s from '%s'", getattr(record.callback, "__name__", str(record.callback)), event
        )

    def __repr__(self) -> str:
        counts = ", ".join(f"{name!r}: {len(records)}" for name, records in self._registry.items())
        return f"<EventHub {{{counts}}}>"


def create_hub(
    listeners: Optional[Mapping[str, Sequence[Listener]]] = None,
    **kwargs: Any,
) -> EventHub:
    """Build an EventHub; accepts the same arguments as the constructor."""
    return EventHub(listeners, **kwargs)
