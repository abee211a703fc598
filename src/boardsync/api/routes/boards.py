"""Board endpoints."""

from typing import Any

from fastapi import APIRouter

from boardsync.api.dependencies import BroadcasterDep, TrelloDep
from boardsync.api.models import BoardCreate, BoardDeleted

router = APIRouter(prefix="/boards", tags=["boards"])


@router.post("")
async def create_board(
    board: BoardCreate, trello: TrelloDep, broadcaster: BroadcasterDep
) -> dict[str, Any]:
    """Create a board."""
    created = await trello.create_board(board.name, default_lists=board.defaultLists)
    await broadcaster.emit_board_created(created)
    return created


@router.get("")
async def list_boards(trello: TrelloDep) -> list[dict[str, Any]]:
    """List the open boards of the configured account."""
    return await trello.list_boards()


@router.delete("/{board_id}", response_model=BoardDeleted)
async def delete_board(
    board_id: str, trello: TrelloDep, broadcaster: BroadcasterDep
) -> BoardDeleted:
    """Archive a board. Trello has no hard delete for boards through this relay."""
    await trello.archive_board(board_id)
    await broadcaster.emit_board_deleted(board_id)
    return BoardDeleted(boardId=board_id)


@router.get("/{board_id}")
async def get_board(board_id: str, trello: TrelloDep) -> dict[str, Any]:
    """Get a board with its open lists and open cards."""
    return await trello.get_board(board_id)
