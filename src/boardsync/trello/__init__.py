"""Trello client - forwards board, list, card and webhook calls to Trello."""

from boardsync.trello.client import DEFAULT_BASE_URL, TrelloClient
from boardsync.trello.exceptions import (
    TrelloError,
    TrelloRequestError,
    TrelloResponseError,
)
from boardsync.trello.models import Board, Card, TrelloList

__all__ = [
    "DEFAULT_BASE_URL",
    "Board",
    "Card",
    "TrelloClient",
    "TrelloError",
    "TrelloList",
    "TrelloRequestError",
    "TrelloResponseError",
]
