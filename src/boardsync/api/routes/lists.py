"""List endpoints."""

from typing import Any

from fastapi import APIRouter

from boardsync.api.dependencies import BroadcasterDep, TrelloDep
from boardsync.api.models import ListCreate

router = APIRouter(prefix="/lists", tags=["lists"])


@router.post("")
async def create_list(
    body: ListCreate, trello: TrelloDep, broadcaster: BroadcasterDep
) -> dict[str, Any]:
    """Create a list on a board."""
    created = await trello.create_list(body.boardId, body.name or "New List")
    await broadcaster.emit_list_created(created, body.boardId)
    return created
