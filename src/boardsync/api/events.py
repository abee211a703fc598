"""Event broadcast bridge for the WebSocket push channel."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from starlette.websockets import WebSocketState

if TYPE_CHECKING:
    from fastapi import WebSocket

logger = logging.getLogger("boardsync.api.events")


class EventType(str, Enum):
    """Types of events pushed to dashboard clients."""

    BOARD_CREATED = "board-created"
    BOARD_DELETED = "board-deleted"
    LIST_CREATED = "list-created"
    CARD_CREATED = "card-created"
    CARD_UPDATED = "card-updated"
    CARD_DELETED = "card-deleted"


# Trello webhook action type -> event type. Other actions are ignored.
WEBHOOK_ACTIONS: dict[str, EventType] = {
    "createCard": EventType.CARD_CREATED,
    "updateCard": EventType.CARD_UPDATED,
    "deleteCard": EventType.CARD_DELETED,
}


@dataclass
class Event:
    """An event to be sent over the push channel."""

    event_type: EventType
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.event_type.value, "data": self.data}

    def to_message(self) -> str:
        """Serialize to the JSON text frame sent to clients."""
        return json.dumps(self.to_dict())


def event_from_webhook(payload: dict[str, Any], board_id: str | None) -> Event | None:
    """Convert a Trello webhook payload into an event.

    Args:
        payload: Decoded webhook body, with ``action`` and ``model`` keys.
        board_id: Board id from the callback URL query string.

    Returns:
        The mapped event, or None if the payload has no recognized action type.
    """
    action = payload.get("action")
    if not isinstance(action, dict):
        return None

    action_type = action.get("type")
    if not isinstance(action_type, str):
        return None

    event_type = WEBHOOK_ACTIONS.get(action_type)
    if event_type is None:
        return None

    return Event(
        event_type=event_type,
        data={"action": action, "model": payload.get("model"), "boardId": board_id},
    )


@dataclass
class Broadcaster:
    """Owns the live WebSocket connections and the webhook registry.

    Built once per application lifespan. All access happens on the event loop,
    so the collections need no locking.
    """

    _connections: set[WebSocket] = field(default_factory=set)
    _webhook_ids: dict[str, str] = field(default_factory=dict)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a WebSocket and add it to the live set."""
        await websocket.accept()
        self._connections.add(websocket)
        logger.info("WebSocket client connected (%d live)", len(self._connections))

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a WebSocket from the live set. Unknown sockets are ignored."""
        if websocket in self._connections:
            self._connections.discard(websocket)
            logger.info("WebSocket client disconnected (%d live)", len(self._connections))

    @property
    def connection_count(self) -> int:
        """Number of live connections."""
        return len(self._connections)

    async def broadcast(self, event: Event) -> None:
        """Send an event to every open connection.

        Connections that are not in the CONNECTED state are skipped. Sends run
        concurrently, so a stalled client does not hold up the others. A failed
        send drops the connection; nothing is queued or retried.

        Args:
            event: Event to send.
        """
        message = event.to_message()
        targets = [
            websocket
            for websocket in self._connections
            if websocket.client_state == WebSocketState.CONNECTED
        ]
        results = await asyncio.gather(
            *(websocket.send_text(message) for websocket in targets),
            return_exceptions=True,
        )
        for websocket, result in zip(targets, results, strict=True):
            if isinstance(result, Exception):
                logger.warning("Dropping WebSocket client after send error: %s", result)
                self.disconnect(websocket)
        logger.debug("Broadcast %s to %d client(s)", event.event_type.value, len(self._connections))

    # Convenience methods for emitting specific event types

    async def emit_board_created(self, board: dict[str, Any]) -> None:
        await self.broadcast(Event(EventType.BOARD_CREATED, board))

    async def emit_board_deleted(self, board_id: str) -> None:
        await self.broadcast(Event(EventType.BOARD_DELETED, {"boardId": board_id}))

    async def emit_list_created(self, trello_list: dict[str, Any], board_id: str) -> None:
        await self.broadcast(
            Event(EventType.LIST_CREATED, {"list": trello_list, "boardId": board_id})
        )

    async def emit_card_created(self, card: dict[str, Any], board_id: str | None) -> None:
        await self.broadcast(Event(EventType.CARD_CREATED, {"card": card, "boardId": board_id}))

    async def emit_card_updated(self, card: dict[str, Any], board_id: str | None) -> None:
        await self.broadcast(Event(EventType.CARD_UPDATED, {"card": card, "boardId": board_id}))

    async def emit_card_deleted(self, card_id: str, board_id: str | None) -> None:
        await self.broadcast(
            Event(EventType.CARD_DELETED, {"cardId": card_id, "boardId": board_id})
        )

    async def handle_webhook(self, payload: dict[str, Any], board_id: str | None) -> None:
        """Broadcast the event for a webhook payload, if its action is recognized."""
        event = event_from_webhook(payload, board_id)
        if event is None:
            action = payload.get("action")
            action_type = action.get("type") if isinstance(action, dict) else None
            logger.debug("Ignoring webhook action %r", action_type)
            return
        await self.broadcast(event)
        logger.info("Webhook received: %s", event.event_type.value)

    # Webhook registry

    def register_webhook(self, board_id: str, webhook_id: str) -> None:
        """Remember the Trello webhook id for a board, replacing any previous one."""
        self._webhook_ids[board_id] = webhook_id

    def webhook_id_for(self, board_id: str) -> str | None:
        return self._webhook_ids.get(board_id)

    @property
    def webhook_ids(self) -> dict[str, str]:
        """Snapshot of the board id -> webhook id registry."""
        return dict(self._webhook_ids)
