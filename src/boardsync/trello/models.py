"""Data models for Trello boards, lists and cards."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Card:
    """A Trello card (a task)."""

    id: str
    name: str = ""
    desc: str = ""
    id_list: str | None = None
    closed: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Card:
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            desc=data.get("desc") or "",
            id_list=data.get("idList"),
            closed=bool(data.get("closed", False)),
        )

    def merged(self, data: dict[str, Any]) -> Card:
        """Return a copy with the fields present in ``data`` applied."""
        return Card(
            id=self.id,
            name=data["name"] if "name" in data else self.name,
            desc=data["desc"] if "desc" in data else self.desc,
            id_list=data["idList"] if "idList" in data else self.id_list,
            closed=bool(data["closed"]) if "closed" in data else self.closed,
        )


@dataclass
class TrelloList:
    """A Trello list (a column on a board)."""

    id: str
    name: str = ""
    id_board: str | None = None
    closed: bool = False
    cards: list[Card] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrelloList:
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            id_board=data.get("idBoard"),
            closed=bool(data.get("closed", False)),
            cards=[Card.from_dict(c) for c in data.get("cards") or []],
        )


@dataclass
class Board:
    """A Trello board."""

    id: str
    name: str = ""
    closed: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Board:
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            closed=bool(data.get("closed", False)),
        )
