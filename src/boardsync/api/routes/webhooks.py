"""Trello webhook registration and callback endpoints."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Query, Request
from fastapi.responses import PlainTextResponse

from boardsync.api.dependencies import BroadcasterDep, SettingsDep, TrelloDep
from boardsync.api.models import WebhookRegister, WebhookRegistered

logger = logging.getLogger("boardsync.api.webhooks")

# Mounted under the API prefix
router = APIRouter(prefix="/webhooks", tags=["webhooks"])

# Mounted at the root; this is the URL Trello calls
callback_router = APIRouter(tags=["webhooks"])


@router.post("/register", response_model=WebhookRegistered)
async def register_webhook(
    body: WebhookRegister,
    trello: TrelloDep,
    settings: SettingsDep,
    broadcaster: BroadcasterDep,
) -> WebhookRegistered:
    """Subscribe the relay's callback URL to changes on a board."""
    webhook_url = settings.require_webhook_url()
    webhook = await trello.create_webhook(
        callback_url=f"{webhook_url}?boardId={body.boardId}",
        id_model=body.boardId,
        description=f"Webhook for board {body.boardId}",
    )
    webhook_id = str(webhook["id"])
    broadcaster.register_webhook(body.boardId, webhook_id)
    logger.info("Registered webhook %s for board %s", webhook_id, body.boardId)
    return WebhookRegistered(webhookId=webhook_id)


@callback_router.head("/webhook")
async def verify_webhook() -> PlainTextResponse:
    """Answer Trello's HEAD check of the callback URL."""
    return PlainTextResponse("OK")


@callback_router.post("/webhook")
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    broadcaster: BroadcasterDep,
    board_id: Annotated[str | None, Query(alias="boardId")] = None,
) -> PlainTextResponse:
    """Acknowledge a Trello callback, then broadcast the mapped event.

    The event is broadcast in a background task so the response goes out
    first; the outcome is invisible to Trello.
    """
    try:
        payload: Any = await request.json()
    except ValueError:
        logger.warning("Ignoring webhook callback with a non-JSON body")
        return PlainTextResponse("OK")

    if isinstance(payload, dict):
        background_tasks.add_task(broadcaster.handle_webhook, payload, board_id)
    else:
        logger.warning("Ignoring webhook callback with a non-object body")
    return PlainTextResponse("OK")
