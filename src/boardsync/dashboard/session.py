"""DashboardSession - keeps a board mirror in sync with the relay."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit, urlunsplit

import websockets

from boardsync.dashboard.exceptions import RelayError
from boardsync.dashboard.mirror import BoardDirectory, BoardMirror

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from boardsync.dashboard.client import RelayClient

logger = logging.getLogger("boardsync.dashboard.session")

BOARDS_REFRESH_INTERVAL = 30.0  # seconds
BOARD_REFRESH_INTERVAL = 60.0  # seconds


def push_url_for(relay_url: str) -> str:
    """Derive the push channel URL from the relay's base URL.

    >>> push_url_for("http://localhost:5000")
    'ws://localhost:5000/ws'
    """
    parts = urlsplit(relay_url)
    scheme = "wss" if parts.scheme == "https" else "ws"
    return urlunsplit((scheme, parts.netloc, parts.path.rstrip("/") + "/ws", "", ""))


class DashboardSession:
    """A headless dashboard.

    Holds one push-channel connection, applies every event to the local
    mirrors, and re-fetches authoritative state on a timer. The push channel
    only makes updates faster; the timers make them correct.
    """

    def __init__(
        self,
        relay: RelayClient,
        push_url: str,
        on_event: Callable[[dict[str, Any]], None] | None = None,
        boards_interval: float = BOARDS_REFRESH_INTERVAL,
        board_interval: float = BOARD_REFRESH_INTERVAL,
    ) -> None:
        self.relay = relay
        self.push_url = push_url
        self.on_event = on_event
        self.boards_interval = boards_interval
        self.board_interval = board_interval
        self.directory = BoardDirectory()
        self.mirror = BoardMirror()
        self.connected = False
        self.error: str | None = None

    async def refresh_boards(self) -> None:
        """Re-fetch the board list and reload the mirror if the selection moved."""
        previous = self.directory.selected_id
        self.directory.load(await self.relay.list_boards())
        if self.directory.selected_id != previous or self.mirror.board is None:
            await self.refresh_board()

    async def refresh_board(self) -> None:
        """Re-fetch the selected board into the mirror."""
        board_id = self.directory.selected_id
        if board_id is None:
            self.mirror.clear()
            return
        self.mirror.load(await self.relay.get_board(board_id))
        logger.debug(
            "Loaded board %s (%d lists, %d cards)",
            board_id,
            len(self.mirror.lists),
            len(self.mirror.cards),
        )

    async def select_board(self, board_id: str) -> None:
        self.directory.select(board_id)
        await self.refresh_board()

    def handle_message(self, raw: str | bytes) -> bool:
        """Apply one push-channel message.

        Malformed messages, and events whose data cannot be applied, are logged
        and dropped.

        Returns:
            True if the message changed local state.
        """
        try:
            event = json.loads(raw)
        except ValueError:
            logger.warning("Dropping malformed push message")
            return False
        if not isinstance(event, dict) or not isinstance(event.get("type"), str):
            logger.warning("Dropping push message without an event type")
            return False

        previous = self.directory.selected_id
        try:
            changed = self.directory.apply(event)
            if self.directory.selected_id != previous:
                # Selected board went away; the next board refresh loads the new one
                self.mirror.clear()
            changed = self.mirror.apply(event) or changed
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Dropping %s event with unusable data: %s", event["type"], e)
            return False

        logger.debug("Applied %s (changed=%s)", event["type"], changed)
        if self.on_event is not None:
            self.on_event(event)
        return changed

    async def listen(self) -> None:
        """Read the push channel until the relay closes it."""
        try:
            async with websockets.connect(self.push_url) as websocket:
                self.connected = True
                logger.info("Push channel connected: %s", self.push_url)
                async for message in websocket:
                    self.handle_message(message)
        except (OSError, websockets.WebSocketException) as e:
            logger.error("Push channel error: %s", e)
        finally:
            self.connected = False
            logger.info("Push channel disconnected")

    async def _every(self, interval: float, refresh: Callable[[], Awaitable[None]]) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await refresh()
                self.error = None
            except RelayError as e:
                self.error = str(e)
                logger.warning("Refresh failed: %s", e)

    async def run(self) -> None:
        """Load state, then listen and poll until the push channel closes."""
        await self.refresh_boards()
        pollers = [
            asyncio.create_task(self._every(self.boards_interval, self.refresh_boards)),
            asyncio.create_task(self._every(self.board_interval, self.refresh_board)),
        ]
        try:
            await self.listen()
        finally:
            for task in pollers:
                task.cancel()
            await asyncio.gather(*pollers, return_exceptions=True)
