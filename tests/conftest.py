"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import pytest
from starlette.websockets import WebSocketState


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: calls the real Trello API (local only)")


# Shared fixtures


class FakeWebSocket:
    """Stand-in for a Starlette WebSocket, recording sent frames."""

    def __init__(self, fail_on_send: bool = False) -> None:
        self.client_state = WebSocketState.CONNECTING
        self.sent: list[str] = []
        self.fail_on_send = fail_on_send

    async def accept(self) -> None:
        self.client_state = WebSocketState.CONNECTED

    async def send_text(self, data: str) -> None:
        if self.fail_on_send:
            raise RuntimeError("connection reset")
        self.sent.append(data)

    def drop(self) -> None:
        """Simulate the peer going away without the handler noticing yet."""
        self.client_state = WebSocketState.DISCONNECTED


@pytest.fixture
def make_websocket():
    """Factory for FakeWebSocket instances."""
    return FakeWebSocket


@pytest.fixture
def sample_board() -> dict:
    """A board as Trello returns it from GET /boards/{id}?lists=open&cards=open."""
    return {
        "id": "b1",
        "name": "Groceries",
        "closed": False,
        "lists": [
            {"id": "l1", "name": "To Do", "idBoard": "b1", "closed": False},
            {"id": "l2", "name": "Done", "idBoard": "b1", "closed": False},
        ],
        "cards": [
            {"id": "c1", "name": "Buy milk", "desc": "", "idList": "l1", "closed": False},
            {"id": "c2", "name": "Buy eggs", "desc": "a dozen", "idList": "l1", "closed": False},
            {"id": "c3", "name": "Buy bread", "desc": "", "idList": "l2", "closed": False},
        ],
    }
