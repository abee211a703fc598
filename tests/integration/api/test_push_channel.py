"""Integration tests for the WebSocket push channel.

These run the real app (lifespan, routes, broadcaster) in-process with only the
Trello client mocked.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from boardsync.api.app import create_app
from boardsync.api.events import Broadcaster, Event, EventType
from boardsync.config import Settings
from boardsync.trello import TrelloClient, TrelloRequestError


@pytest.fixture
def trello() -> AsyncMock:
    return AsyncMock(spec=TrelloClient)


@pytest.fixture
def broadcaster() -> Broadcaster:
    return Broadcaster()


@pytest.fixture
def client(trello: AsyncMock, broadcaster: Broadcaster):
    """Run the app with its lifespan."""
    app = create_app(
        settings=Settings(webhook_url="https://relay.example.com/webhook"),
        trello=trello,
        broadcaster=broadcaster,
    )
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.mark.integration
class TestConnections:
    """Tests for connection bookkeeping through the real endpoint."""

    def test_connect_and_disconnect(self, client: TestClient, broadcaster: Broadcaster) -> None:
        with client.websocket_connect("/ws"):
            assert broadcaster.connection_count == 1
            with client.websocket_connect("/ws"):
                assert broadcaster.connection_count == 2
            assert broadcaster.connection_count == 1

        assert broadcaster.connection_count == 0

    def test_malformed_client_message_keeps_connection(
        self, client: TestClient, broadcaster: Broadcaster
    ) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.send_text("this is not json")
            ws.send_bytes(b"\x00\x01")
            ws.send_json({"type": "ping"})

            client.post("/webhook?boardId=b1", json={"action": {"type": "deleteCard"}})

            assert ws.receive_json()["type"] == "card-deleted"
            assert broadcaster.connection_count == 1


@pytest.mark.integration
class TestBroadcastScenarios:
    """End-to-end broadcast scenarios."""

    def test_both_clients_receive_one_copy(
        self, client: TestClient, broadcaster: Broadcaster
    ) -> None:
        """A and B connect; a card-created broadcast reaches each exactly once."""
        payload = {"card": {"id": "c1", "idList": "l1"}, "boardId": "b1"}

        with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
            client.portal.call(broadcaster.broadcast, Event(EventType.CARD_CREATED, payload))
            client.portal.call(broadcaster.emit_board_deleted, "marker")

            expected = {"type": "card-created", "data": payload}
            assert ws_a.receive_json() == expected
            assert ws_b.receive_json() == expected
            # The next frame is the marker, so the card event came only once
            assert ws_a.receive_json()["type"] == "board-deleted"
            assert ws_b.receive_json()["type"] == "board-deleted"

    def test_create_task_reaches_connected_clients(
        self, client: TestClient, trello: AsyncMock
    ) -> None:
        """POST /tasks answers with the card and pushes card-created to everyone."""
        card = {"id": "c9", "name": "Buy milk", "desc": "", "idList": "l1", "closed": False}
        trello.create_card.return_value = card

        with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
            response = client.post(
                "/api/tasks",
                json={"listId": "l1", "name": "Buy milk", "desc": "", "boardId": "b1"},
            )

            assert response.status_code == 200
            assert response.json() == card
            expected = {"type": "card-created", "data": {"card": card, "boardId": "b1"}}
            assert ws_a.receive_json() == expected
            assert ws_b.receive_json() == expected

    def test_failed_delete_broadcasts_nothing(
        self, client: TestClient, trello: AsyncMock
    ) -> None:
        """DELETE /boards/b1 failing upstream yields 500 and no event."""
        trello.archive_board.side_effect = TrelloRequestError(
            "Trello request failed: PUT /boards/b1: connection refused"
        )
        trello.create_list.return_value = {"id": "l3", "name": "Doing"}

        with client.websocket_connect("/ws") as ws:
            response = client.delete("/api/boards/b1")
            client.post("/api/lists", json={"boardId": "b1", "name": "Doing"})

            assert response.status_code == 500
            assert "connection refused" in response.json()["error"]
            # First frame is the list, not a board-deleted
            assert ws.receive_json()["type"] == "list-created"

    def test_closed_client_gets_nothing(
        self, client: TestClient, trello: AsyncMock, broadcaster: Broadcaster
    ) -> None:
        trello.archive_card.return_value = {"id": "c1", "closed": True}

        with client.websocket_connect("/ws") as ws_keep:
            with client.websocket_connect("/ws"):
                pass
            assert broadcaster.connection_count == 1

            client.request("DELETE", "/api/tasks/c1", json={"boardId": "b1"})

            assert ws_keep.receive_json() == {
                "type": "card-deleted",
                "data": {"cardId": "c1", "boardId": "b1"},
            }


@pytest.mark.integration
class TestWebhookBridge:
    """Webhook callbacks reach push-channel clients."""

    def test_recognized_then_unrecognized(self, client: TestClient) -> None:
        """Unrecognized actions produce no frame; recognized ones produce one."""
        with client.websocket_connect("/ws") as ws:
            ignored = client.post(
                "/webhook?boardId=b1", json={"action": {"type": "commentCard"}, "model": {}}
            )
            handled = client.post(
                "/webhook?boardId=b1",
                json={
                    "action": {"type": "createCard", "data": {"card": {"id": "c7"}}},
                    "model": {"id": "b1"},
                },
            )

            assert ignored.status_code == 200
            assert handled.status_code == 200
            message = ws.receive_json()
            assert message["type"] == "card-created"
            assert message["data"]["boardId"] == "b1"
            assert message["data"]["action"]["data"]["card"]["id"] == "c7"
