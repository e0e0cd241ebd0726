from .errors import EventHubError, InvalidListenerError
from .hub import EventHub, ListenerRecord, Unbind, create_hub
from .settings import SETTINGS, HubSettings

__all__ = [
    "EventHub",
    "EventHubError",
    "HubSettings",
    "InvalidListenerError",
    "ListenerRecord",
    "SETTINGS",
    "Unbind",
    "create_hub",
]
