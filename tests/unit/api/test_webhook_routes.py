"""Unit tests for webhook registration and callback routes."""

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from boardsync.api.events import Broadcaster, EventType
from boardsync.config import Settings
from boardsync.trello import TrelloResponseError


@pytest.mark.unit
class TestRegisterWebhook:
    """Tests for POST /webhooks/register."""

    def test_register_success(
        self, client: TestClient, trello: AsyncMock, broadcaster: Broadcaster
    ) -> None:
        """The callback URL carries the board id and the webhook id is remembered."""
        trello.create_webhook.return_value = {"id": "wh1", "idModel": "b1", "active": True}

        response = client.post("/api/webhooks/register", json={"boardId": "b1"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "webhookId": "wh1",
            "message": "Webhook registered successfully",
        }
        trello.create_webhook.assert_awaited_once_with(
            callback_url="https://relay.example.com/webhook?boardId=b1",
            id_model="b1",
            description="Webhook for board b1",
        )
        assert broadcaster.webhook_id_for("b1") == "wh1"

    def test_register_without_webhook_url(
        self, client: TestClient, trello: AsyncMock, settings: Settings
    ) -> None:
        """400 when WEBHOOK_URL is not configured; Trello is not called."""
        settings.webhook_url = None

        response = client.post("/api/webhooks/register", json={"boardId": "b1"})

        assert response.status_code == 400
        assert response.json() == {"error": "WEBHOOK_URL not configured"}
        trello.create_webhook.assert_not_awaited()

    def test_register_upstream_failure(
        self, client: TestClient, trello: AsyncMock, broadcaster: Broadcaster
    ) -> None:
        trello.create_webhook.side_effect = TrelloResponseError(
            "URL (https://relay.example.com/webhook?boardId=b1) did not return 200", 400
        )

        response = client.post("/api/webhooks/register", json={"boardId": "b1"})

        assert response.status_code == 500
        assert "did not return 200" in response.json()["error"]
        assert broadcaster.webhook_ids == {}


@pytest.mark.unit
class TestWebhookCallback:
    """Tests for HEAD and POST /webhook."""

    def test_head_returns_ok(self, client: TestClient) -> None:
        response = client.head("/webhook")

        assert response.status_code == 200

    @pytest.mark.parametrize(
        ("action_type", "event_type"),
        [
            ("createCard", EventType.CARD_CREATED),
            ("updateCard", EventType.CARD_UPDATED),
            ("deleteCard", EventType.CARD_DELETED),
        ],
    )
    def test_recognized_action_broadcasts_once(
        self, client: TestClient, emitted: Callable, action_type: str, event_type: EventType
    ) -> None:
        action = {"type": action_type, "data": {"card": {"id": "c1"}}}
        model = {"id": "b1", "name": "Groceries"}

        response = client.post("/webhook?boardId=b1", json={"action": action, "model": model})

        assert response.status_code == 200
        events = emitted()
        assert len(events) == 1
        assert events[0].event_type == event_type
        assert events[0].data == {"action": action, "model": model, "boardId": "b1"}

    def test_unrecognized_action_is_ignored(self, client: TestClient, emitted: Callable) -> None:
        response = client.post(
            "/webhook?boardId=b1", json={"action": {"type": "commentCard"}, "model": {}}
        )

        assert response.status_code == 200
        assert emitted() == []

    def test_missing_action_is_ignored(self, client: TestClient, emitted: Callable) -> None:
        response = client.post("/webhook", json={"model": {"id": "b1"}})

        assert response.status_code == 200
        assert emitted() == []

    @pytest.mark.parametrize("body", [b"not json", b"[1, 2, 3]", b""])
    def test_unusable_body_is_acknowledged(
        self, client: TestClient, emitted: Callable, body: bytes
    ) -> None:
        response = client.post(
            "/webhook", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 200
        assert emitted() == []

    def test_acknowledged_even_if_broadcast_fails(
        self, client: TestClient, broadcaster: Broadcaster
    ) -> None:
        """The 200 goes out before the event is processed."""
        broadcaster.broadcast.side_effect = RuntimeError("boom")

        response = client.post(
            "/webhook?boardId=b1", json={"action": {"type": "createCard"}, "model": {}}
        )

        assert response.status_code == 200
        broadcaster.broadcast.assert_awaited_once()
