"""Liveness probe."""

from fastapi import APIRouter

from boardsync.api.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report that the process is up."""
    return HealthResponse()
