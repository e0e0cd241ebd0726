from __future__ import annotations


class EventHubError(Exception):
    """Base class for errors raised by the event hub."""


class InvalidListenerError(EventHubError, TypeError):
    """Raised when a non-callable is registered as a listener."""
