"""Task (card) endpoints."""

from typing import Any

from fastapi import APIRouter

from boardsync.api.dependencies import BroadcasterDep, TrelloDep
from boardsync.api.models import TaskCreate, TaskDelete, TaskDeleted, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("")
async def create_task(
    task: TaskCreate, trello: TrelloDep, broadcaster: BroadcasterDep
) -> dict[str, Any]:
    """Create a card in a list."""
    card = await trello.create_card(task.listId, task.name, task.desc)
    await broadcaster.emit_card_created(card, task.boardId)
    return card


@router.put("/{card_id}")
async def update_task(
    card_id: str, task: TaskUpdate, trello: TrelloDep, broadcaster: BroadcasterDep
) -> dict[str, Any]:
    """Update a card's name, description or list."""
    card = await trello.update_card(card_id, name=task.name, desc=task.desc, id_list=task.idList)
    await broadcaster.emit_card_updated(card, task.boardId)
    return card


@router.delete("/{card_id}", response_model=TaskDeleted)
async def delete_task(
    card_id: str,
    trello: TrelloDep,
    broadcaster: BroadcasterDep,
    body: TaskDelete | None = None,
) -> TaskDeleted:
    """Archive a card."""
    await trello.archive_card(card_id)
    await broadcaster.emit_card_deleted(card_id, body.boardId if body else None)
    return TaskDeleted(cardId=card_id)
