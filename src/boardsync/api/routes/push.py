"""WebSocket push channel endpoint."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket

from boardsync.api.dependencies import BroadcasterDep

logger = logging.getLogger("boardsync.api.push")

router = APIRouter(tags=["push"])


@router.websocket("/ws")
async def push_channel(websocket: WebSocket, broadcaster: BroadcasterDep) -> None:
    """Hold a dashboard connection open and deliver broadcast events to it.

    The channel is server-to-client only. Client frames are read so that a
    close is noticed; their content is discarded.
    """
    await broadcaster.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            _discard_client_message(message)
    except Exception:
        logger.warning("WebSocket error", exc_info=True)
    finally:
        broadcaster.disconnect(websocket)


def _discard_client_message(message: dict) -> None:
    text = message.get("text")
    if text is None:
        logger.warning("Dropping non-text frame from WebSocket client")
        return
    try:
        json.loads(text)
    except ValueError:
        logger.warning("Dropping malformed message from WebSocket client")
        return
    logger.debug("Ignoring message from WebSocket client")
