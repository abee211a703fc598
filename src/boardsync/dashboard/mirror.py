"""Local mirrors of relay state, kept current by push-channel events.

Events are applied by id, so applying one twice, or applying one about a card
the mirror never saw, leaves the mirror consistent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from boardsync.trello.models import Board, Card, TrelloList

logger = logging.getLogger("boardsync.dashboard.mirror")


def _card_payload(data: dict[str, Any]) -> dict[str, Any] | None:
    """Extract the card from relay-shaped or webhook-shaped event data.

    Relay mutations carry ``{"card": {...}}``. Webhook events carry the Trello
    action, whose ``data.card`` is partial and whose list sits beside it.
    """
    card = data.get("card")
    if isinstance(card, dict):
        return card

    action = data.get("action")
    if not isinstance(action, dict):
        return None
    action_data = action.get("data")
    if not isinstance(action_data, dict):
        return None
    card = action_data.get("card")
    if not isinstance(card, dict) or "id" not in card:
        return None

    card = dict(card)
    trello_list = action_data.get("listAfter") or action_data.get("list")
    if "idList" not in card and isinstance(trello_list, dict) and "id" in trello_list:
        card["idList"] = trello_list["id"]
    return card


@dataclass
class BoardMirror:
    """In-memory copy of the selected board's open lists and cards."""

    board: Board | None = None
    lists: list[TrelloList] = field(default_factory=list)

    @property
    def board_id(self) -> str | None:
        return self.board.id if self.board else None

    def load(self, payload: dict[str, Any]) -> None:
        """Replace the mirror with a board fetched from the relay.

        Trello returns ``lists`` and ``cards`` side by side; cards are grouped
        under their list here, in the order Trello returned them.
        """
        self.board = Board.from_dict(payload)
        self.lists = [
            TrelloList.from_dict(item)
            for item in payload.get("lists") or []
            if not item.get("closed")
        ]
        by_id = {trello_list.id: trello_list for trello_list in self.lists}
        for item in payload.get("cards") or []:
            card = Card.from_dict(item)
            if card.closed or card.id_list not in by_id:
                continue
            if self._find_card(card.id) is None:
                by_id[card.id_list].cards.append(card)

    def clear(self) -> None:
        self.board = None
        self.lists = []

    def get_list(self, list_id: str | None) -> TrelloList | None:
        for trello_list in self.lists:
            if trello_list.id == list_id:
                return trello_list
        return None

    def get_card(self, card_id: str) -> Card | None:
        found = self._find_card(card_id)
        return found[1] if found else None

    @property
    def cards(self) -> list[Card]:
        return [card for trello_list in self.lists for card in trello_list.cards]

    def _find_card(self, card_id: str) -> tuple[TrelloList, Card] | None:
        for trello_list in self.lists:
            for card in trello_list.cards:
                if card.id == card_id:
                    return trello_list, card
        return None

    def _remove_card(self, card_id: str) -> bool:
        found = self._find_card(card_id)
        if found is None:
            return False
        trello_list, card = found
        trello_list.cards.remove(card)
        return True

    def apply(self, event: dict[str, Any]) -> bool:
        """Apply a push-channel event.

        Args:
            event: Decoded ``{"type", "data"}`` message.

        Returns:
            True if the mirror changed.
        """
        if self.board is None:
            return False
        data = event.get("data")
        if not isinstance(data, dict):
            return False
        board_id = data.get("boardId")
        if board_id is not None and board_id != self.board.id:
            return False

        handler = {
            "card-created": self._card_created,
            "card-updated": self._card_updated,
            "card-deleted": self._card_deleted,
            "list-created": self._list_created,
        }.get(event.get("type", ""))
        if handler is None:
            return False
        return handler(data)

    def _card_created(self, data: dict[str, Any]) -> bool:
        payload = _card_payload(data)
        if payload is None or "id" not in payload:
            return False
        card = Card.from_dict(payload)
        target = self.get_list(card.id_list)
        if target is None or card.closed:
            return False
        # Replace rather than duplicate when the event is seen twice
        self._remove_card(card.id)
        target.cards.append(card)
        return True

    def _card_updated(self, data: dict[str, Any]) -> bool:
        payload = _card_payload(data)
        if payload is None or "id" not in payload:
            return False
        found = self._find_card(str(payload["id"]))
        if found is None:
            return False

        current_list, current = found
        updated = current.merged(payload)
        if updated.closed:
            current_list.cards.remove(current)
            return True

        if updated.id_list == current_list.id:
            current_list.cards[current_list.cards.index(current)] = updated
            return True

        current_list.cards.remove(current)
        target = self.get_list(updated.id_list)
        # Moved to a list on another board: it simply leaves this one
        if target is not None:
            target.cards.append(updated)
        return True

    def _card_deleted(self, data: dict[str, Any]) -> bool:
        card_id = data.get("cardId")
        if card_id is None:
            payload = _card_payload(data)
            card_id = payload.get("id") if payload else None
        if card_id is None:
            return False
        return self._remove_card(str(card_id))

    def _list_created(self, data: dict[str, Any]) -> bool:
        payload = data.get("list")
        if not isinstance(payload, dict) or "id" not in payload:
            return False
        if self.get_list(str(payload["id"])) is not None:
            return False
        self.lists.append(TrelloList.from_dict({**payload, "cards": []}))
        return True


@dataclass
class BoardDirectory:
    """The open boards of the account and the current selection."""

    boards: list[Board] = field(default_factory=list)
    selected_id: str | None = None

    def load(self, payloads: list[dict[str, Any]]) -> None:
        """Replace the board list, keeping the selection if it still exists."""
        self.boards = [Board.from_dict(item) for item in payloads if not item.get("closed")]
        self._fix_selection()

    def get(self, board_id: str) -> Board | None:
        for board in self.boards:
            if board.id == board_id:
                return board
        return None

    def select(self, board_id: str | None) -> None:
        if board_id is not None and self.get(board_id) is None:
            raise KeyError(board_id)
        self.selected_id = board_id

    def _fix_selection(self) -> None:
        if self.selected_id is not None and self.get(self.selected_id) is not None:
            return
        self.selected_id = self.boards[0].id if self.boards else None

    def apply(self, event: dict[str, Any]) -> bool:
        """Apply a board-created or board-deleted event.

        Returns:
            True if the directory changed.
        """
        data = event.get("data")
        if not isinstance(data, dict):
            return False

        event_type = event.get("type")
        if event_type == "board-created":
            if "id" not in data or data.get("closed") or self.get(str(data["id"])):
                return False
            self.boards.append(Board.from_dict(data))
            if self.selected_id is None:
                self.selected_id = self.boards[-1].id
            return True

        if event_type == "board-deleted":
            board = self.get(str(data.get("boardId")))
            if board is None:
                return False
            self.boards.remove(board)
            self._fix_selection()
            return True

        return False
