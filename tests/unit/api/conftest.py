"""Fixtures for route tests: the real app with a mocked Trello client."""

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from boardsync.api.app import create_app
from boardsync.api.events import Broadcaster, Event
from boardsync.config import Settings
from boardsync.trello import TrelloClient


@pytest.fixture
def trello() -> AsyncMock:
    """A TrelloClient whose coroutine methods are AsyncMocks."""
    return AsyncMock(spec=TrelloClient)


@pytest.fixture
def broadcaster() -> Broadcaster:
    """A Broadcaster whose broadcast() records events instead of sending them."""
    b = Broadcaster()
    b.broadcast = AsyncMock()
    return b


@pytest.fixture
def settings() -> Settings:
    return Settings(
        trello_api_key="key",
        trello_api_token="token",
        webhook_url="https://relay.example.com/webhook",
    )


@pytest.fixture
def app(settings: Settings, trello: AsyncMock, broadcaster: Broadcaster) -> FastAPI:
    """Create the app around the mocked collaborators."""
    return create_app(settings=settings, trello=trello, broadcaster=broadcaster)


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def emitted(broadcaster: Broadcaster) -> Callable[[], list[Event]]:
    """Return a function listing the events broadcast so far, in order."""

    def _emitted() -> list[Event]:
        return [call.args[0] for call in broadcaster.broadcast.await_args_list]

    return _emitted
