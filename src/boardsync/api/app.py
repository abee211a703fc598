"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from boardsync import __version__
from boardsync.api.events import Broadcaster
from boardsync.api.models import ErrorResponse
from boardsync.api.routes import boards, health, lists, push, tasks, webhooks
from boardsync.config import ConfigError, Settings
from boardsync.trello import TrelloClient, TrelloError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger("boardsync.api")

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the process-scoped broadcaster and Trello client and discards them
    on shutdown. Objects already placed on ``app.state`` (tests) are kept.
    """
    settings: Settings = app.state.settings
    if not settings.has_trello_credentials:
        logger.warning("TRELLO_API_KEY / TRELLO_API_TOKEN not set; upstream calls will fail")
    if not settings.webhook_url:
        logger.warning("WEBHOOK_URL not set; webhook registration is disabled")

    # Startup
    owns_trello = getattr(app.state, "trello", None) is None
    if owns_trello:
        app.state.trello = TrelloClient(
            api_key=settings.trello_api_key,
            api_token=settings.trello_api_token,
            base_url=settings.trello_api_url,
        )
    if getattr(app.state, "broadcaster", None) is None:
        app.state.broadcaster = Broadcaster()

    yield
    # Shutdown
    if owns_trello:
        await app.state.trello.aclose()
        app.state.trello = None
    app.state.broadcaster = None


def create_app(
    settings: Settings | None = None,
    trello: TrelloClient | None = None,
    broadcaster: Broadcaster | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Relay settings. Defaults to Settings.from_env().
        trello: Trello client to use instead of building one from settings.
        broadcaster: Broadcaster to use instead of a fresh one.
    """
    app = FastAPI(
        title="boardsync",
        description="Real-time relay for the Trello boards API",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings if settings is not None else Settings.from_env()
    app.state.trello = trello
    app.state.broadcaster = broadcaster

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(TrelloError)
    async def trello_error_handler(request: Request, exc: TrelloError) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )

    # Include routers
    app.include_router(boards.router, prefix=API_PREFIX)
    app.include_router(lists.router, prefix=API_PREFIX)
    app.include_router(tasks.router, prefix=API_PREFIX)
    app.include_router(webhooks.router, prefix=API_PREFIX)
    app.include_router(webhooks.callback_router)
    app.include_router(push.router)
    app.include_router(health.router)

    return app
