"""CLI entry point for boardsync."""

from __future__ import annotations

import asyncio
import json
import sys

import click

from boardsync import __version__
from boardsync.config import ConfigError, Settings
from boardsync.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="boardsync")
def main() -> None:
    """boardsync - real-time relay for Trello boards."""


@main.command()
@click.option("--host", default=None, help="Interface to bind (default: HOST or 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Port to listen on (default: PORT or 5000)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: BOARDSYNC_LOG_LEVEL or INFO)",
)
def serve(host: str | None, port: int | None, log_level: str | None) -> None:
    """Run the relay server."""
    import uvicorn  # noqa: PLC0415

    from boardsync.api.app import create_app  # noqa: PLC0415

    logger = setup_logging(level=log_level)
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port

    logger.info("Relay listening on http://%s:%d", settings.host, settings.port)
    logger.info("Push channel on ws://%s:%d/ws", settings.host, settings.port)
    logger.info("Webhook URL: %s", settings.webhook_url)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


@main.command()
@click.option(
    "--relay-url",
    default="http://localhost:5000",
    show_default=True,
    help="Base URL of the relay server",
)
@click.option(
    "--board",
    "board_id",
    default=None,
    help="Board to watch (default: first open board)",
)
def watch(relay_url: str, board_id: str | None) -> None:
    """Follow a board from the terminal, printing every pushed event."""
    from boardsync.dashboard import (  # noqa: PLC0415
        DashboardSession,
        RelayClient,
        RelayError,
        push_url_for,
    )

    setup_logging(console=False)

    async def _run() -> None:
        relay = RelayClient(relay_url.rstrip("/") + "/api")
        session = DashboardSession(
            relay,
            push_url_for(relay_url),
            on_event=lambda event: click.echo(json.dumps(event)),
        )
        try:
            if board_id is not None:
                await session.refresh_boards()
                await session.select_board(board_id)
            await session.run()
        finally:
            await relay.aclose()

    try:
        asyncio.run(_run())
    except (RelayError, KeyError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
