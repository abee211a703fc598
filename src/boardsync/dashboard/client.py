"""RelayClient - REST client for the relay server used by the dashboard."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from boardsync.dashboard.exceptions import RelayError

logger = logging.getLogger("boardsync.dashboard.client")


class RelayClient:
    """Async client for the relay's REST API.

    Mutations made through this client come back to every dashboard, this one
    included, as push-channel events.
    """

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        """Initialize the relay client.

        Args:
            base_url: Relay API root, e.g. "http://localhost:5000/api"
            timeout: Transport timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        try:
            response = await self.client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise RelayError(f"Relay request failed: {method} {path}: {e}") from e

        if not response.is_success:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            detail = payload.get("error") if isinstance(payload, dict) else None
            raise RelayError(
                f"Relay request failed: {method} {path}: "
                f"{response.status_code} - {detail or response.text}",
                status_code=response.status_code,
            )
        return response.json()

    async def list_boards(self) -> list[dict[str, Any]]:
        boards: list[dict[str, Any]] = await self._request("GET", "/boards")
        return boards

    async def create_board(self, name: str, default_lists: bool = True) -> dict[str, Any]:
        board: dict[str, Any] = await self._request(
            "POST", "/boards", json={"name": name, "defaultLists": default_lists}
        )
        return board

    async def delete_board(self, board_id: str) -> None:
        await self._request("DELETE", f"/boards/{board_id}")

    async def get_board(self, board_id: str) -> dict[str, Any]:
        board: dict[str, Any] = await self._request("GET", f"/boards/{board_id}")
        return board

    async def create_list(self, board_id: str, name: str) -> dict[str, Any]:
        trello_list: dict[str, Any] = await self._request(
            "POST", "/lists", json={"boardId": board_id, "name": name}
        )
        return trello_list

    async def create_task(
        self, board_id: str, list_id: str, name: str, desc: str = ""
    ) -> dict[str, Any]:
        card: dict[str, Any] = await self._request(
            "POST",
            "/tasks",
            json={"listId": list_id, "name": name, "desc": desc, "boardId": board_id},
        )
        return card

    async def update_task(
        self,
        board_id: str,
        card_id: str,
        name: str | None = None,
        desc: str | None = None,
        id_list: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"boardId": board_id}
        if name is not None:
            body["name"] = name
        if desc is not None:
            body["desc"] = desc
        if id_list is not None:
            body["idList"] = id_list
        card: dict[str, Any] = await self._request("PUT", f"/tasks/{card_id}", json=body)
        return card

    async def delete_task(self, board_id: str, card_id: str) -> None:
        await self._request("DELETE", f"/tasks/{card_id}", json={"boardId": board_id})

    async def register_webhook(self, board_id: str) -> str:
        """Subscribe the relay to a board's Trello webhook.

        Returns:
            The Trello webhook id
        """
        result: dict[str, Any] = await self._request(
            "POST", "/webhooks/register", json={"boardId": board_id}
        )
        logger.info("Registered webhook %s for board %s", result.get("webhookId"), board_id)
        return str(result["webhookId"])
