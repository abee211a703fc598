"""FastAPI dependencies for dependency injection.

The broadcaster, Trello client and settings are built in the application
lifespan and held on ``app.state``; handlers reach them through these
dependencies so tests can swap them with ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from boardsync.api.events import Broadcaster
from boardsync.config import Settings
from boardsync.trello import TrelloClient


def get_broadcaster(conn: HTTPConnection) -> Broadcaster:
    """Dependency that provides the Broadcaster (HTTP and WebSocket handlers)."""
    broadcaster: Broadcaster | None = getattr(conn.app.state, "broadcaster", None)
    if broadcaster is None:
        raise RuntimeError("Broadcaster not initialized. Is the app lifespan running?")
    return broadcaster


def get_trello_client(conn: HTTPConnection) -> TrelloClient:
    """Dependency that provides the TrelloClient instance."""
    client: TrelloClient | None = getattr(conn.app.state, "trello", None)
    if client is None:
        raise RuntimeError("TrelloClient not initialized. Is the app lifespan running?")
    return client


def get_settings(conn: HTTPConnection) -> Settings:
    """Dependency that provides the relay Settings."""
    settings: Settings | None = getattr(conn.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("Settings not initialized. Is the app lifespan running?")
    return settings


# Type aliases for dependency injection
BroadcasterDep = Annotated[Broadcaster, Depends(get_broadcaster)]
TrelloDep = Annotated[TrelloClient, Depends(get_trello_client)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
