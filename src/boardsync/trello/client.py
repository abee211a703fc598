"""TrelloClient - Forwards board, list, card and webhook calls to the Trello REST API."""

from __future__ import annotations

from typing import Any

import httpx

from boardsync.logging import get_logger, sanitize_for_log, truncate_output
from boardsync.trello.exceptions import TrelloRequestError, TrelloResponseError

logger = get_logger("trello")

DEFAULT_BASE_URL = "https://api.trello.com/1"


class TrelloClient:
    """Async client for the Trello REST API.

    Each public method performs exactly one HTTP call and returns the decoded
    JSON body unchanged. There are no retries.
    """

    def __init__(
        self,
        api_key: str,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the Trello client.

        Args:
            api_key: Trello API key
            api_token: Trello API token for the account whose boards are served
            base_url: Trello REST API URL (for testing)
            timeout: Transport timeout in seconds
        """
        self.api_key = api_key
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def _auth_params(self) -> dict[str, str]:
        return {"key": self.api_key, "token": self.api_token}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Perform one request against Trello.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            params: Extra query parameters
            json: JSON body

        Returns:
            Decoded JSON response

        Raises:
            TrelloRequestError: If the request could not be completed
            TrelloResponseError: If Trello returned a non-success status
        """
        query = {**(params or {}), **self._auth_params}
        try:
            response = await self.client.request(method, path, params=query, json=json)
        except httpx.HTTPError as e:
            message = sanitize_for_log(f"Trello request failed: {method} {path}: {e}")
            logger.error(message)
            raise TrelloRequestError(message) from e

        if not response.is_success:
            body = truncate_output(response.text)
            message = sanitize_for_log(
                f"Trello request failed: {method} {path}: {response.status_code} - {body}"
            )
            logger.error(message)
            raise TrelloResponseError(message, response.status_code)

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response.json()

    # Boards

    async def create_board(self, name: str, default_lists: bool = True) -> dict[str, Any]:
        """Create a board.

        Args:
            name: Board name
            default_lists: Whether Trello should add its default lists

        Returns:
            The created board
        """
        logger.info("Creating board: %s", name)
        board: dict[str, Any] = await self._request(
            "POST", "/boards", json={"name": name, "defaultLists": default_lists}
        )
        return board

    async def list_boards(self) -> list[dict[str, Any]]:
        """Get the open boards of the token's member."""
        boards: list[dict[str, Any]] = await self._request("GET", "/members/me/boards")
        open_boards = [b for b in boards if not b.get("closed")]
        logger.debug("Found %d open board(s)", len(open_boards))
        return open_boards

    async def archive_board(self, board_id: str) -> dict[str, Any]:
        """Close (archive) a board. Trello keeps closed boards."""
        logger.info("Archiving board %s", board_id)
        board: dict[str, Any] = await self._request(
            "PUT", f"/boards/{board_id}", json={"closed": True}
        )
        return board

    async def get_board(self, board_id: str) -> dict[str, Any]:
        """Get a board with its open lists and open cards."""
        board: dict[str, Any] = await self._request(
            "GET", f"/boards/{board_id}", params={"lists": "open", "cards": "open"}
        )
        return board

    # Lists

    async def create_list(self, board_id: str, name: str) -> dict[str, Any]:
        """Create a list on a board."""
        logger.info("Creating list %r on board %s", name, board_id)
        trello_list: dict[str, Any] = await self._request(
            "POST", "/lists", json={"idBoard": board_id, "name": name}
        )
        return trello_list

    # Cards

    async def create_card(self, list_id: str, name: str, desc: str = "") -> dict[str, Any]:
        """Create a card in a list."""
        logger.info("Creating card %r in list %s", name, list_id)
        card: dict[str, Any] = await self._request(
            "POST", "/cards", json={"idList": list_id, "name": name, "desc": desc}
        )
        return card

    async def update_card(
        self,
        card_id: str,
        name: str | None = None,
        desc: str | None = None,
        id_list: str | None = None,
    ) -> dict[str, Any]:
        """Update a card.

        Empty ``name`` and ``id_list`` are not sent; an empty ``desc`` is, so a
        description can be cleared.

        Args:
            card_id: Card to update
            name: New name
            desc: New description
            id_list: List to move the card to

        Returns:
            The updated card
        """
        changes: dict[str, Any] = {}
        if name:
            changes["name"] = name
        if desc is not None:
            changes["desc"] = desc
        if id_list:
            changes["idList"] = id_list

        logger.info("Updating card %s (%s)", card_id, ", ".join(changes) or "no fields")
        card: dict[str, Any] = await self._request("PUT", f"/cards/{card_id}", json=changes)
        return card

    async def archive_card(self, card_id: str) -> dict[str, Any]:
        """Close (archive) a card."""
        logger.info("Archiving card %s", card_id)
        card: dict[str, Any] = await self._request(
            "PUT", f"/cards/{card_id}", json={"closed": True}
        )
        return card

    # Webhooks

    async def create_webhook(
        self, callback_url: str, id_model: str, description: str = ""
    ) -> dict[str, Any]:
        """Subscribe ``callback_url`` to changes of a model (board, list or card).

        Trello checks the callback with a HEAD request before answering.
        """
        logger.info("Registering webhook for model %s", id_model)
        webhook: dict[str, Any] = await self._request(
            "POST",
            "/webhooks",
            json={
                "callbackURL": callback_url,
                "idModel": id_model,
                "description": description,
            },
        )
        return webhook
