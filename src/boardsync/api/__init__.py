"""Relay server: REST forwarding, webhook callbacks and the WebSocket push channel."""

from boardsync.api.app import create_app
from boardsync.api.events import (
    WEBHOOK_ACTIONS,
    Broadcaster,
    Event,
    EventType,
    event_from_webhook,
)

__all__ = [
    "WEBHOOK_ACTIONS",
    "Broadcaster",
    "Event",
    "EventType",
    "create_app",
    "event_from_webhook",
]
