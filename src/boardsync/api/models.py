"""Pydantic models for the REST API.

Request bodies use the same camelCase field names as the dashboard sends them.
Trello payloads in responses are passed through untouched.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    error: str


class BoardCreate(BaseModel):
    """Request model for creating a board."""

    name: str = Field(..., min_length=1, max_length=16384)
    defaultLists: bool = True  # noqa: N815


class BoardDeleted(BaseModel):
    """Response model for archiving a board."""

    success: bool = True
    boardId: str  # noqa: N815


class ListCreate(BaseModel):
    """Request model for creating a list."""

    boardId: str = Field(..., min_length=1)  # noqa: N815
    name: str = "New List"


class TaskCreate(BaseModel):
    """Request model for creating a card."""

    listId: str = Field(..., min_length=1)  # noqa: N815
    name: str = Field(..., min_length=1, max_length=16384)
    desc: str = ""
    boardId: str | None = None  # noqa: N815


class TaskUpdate(BaseModel):
    """Request model for updating a card (partial update)."""

    name: str | None = None
    desc: str | None = None
    idList: str | None = None  # noqa: N815
    boardId: str | None = None  # noqa: N815


class TaskDelete(BaseModel):
    """Optional body for archiving a card."""

    boardId: str | None = None  # noqa: N815


class TaskDeleted(BaseModel):
    """Response model for archiving a card."""

    success: bool = True
    cardId: str  # noqa: N815


class WebhookRegister(BaseModel):
    """Request model for subscribing to a board's webhook."""

    boardId: str = Field(..., min_length=1)  # noqa: N815


class WebhookRegistered(BaseModel):
    """Response model for a webhook registration."""

    success: bool = True
    webhookId: str  # noqa: N815
    message: str = "Webhook registered successfully"


class HealthResponse(BaseModel):
    """Response model for the liveness probe."""

    status: str = "ok"
