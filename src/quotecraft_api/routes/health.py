"""Health check endpoint."""

from fastapi import APIRouter, Depends

from quotecraft_api import __version__
from quotecraft_api.dependencies import get_store
from quotecraft_api.models.responses import HealthResponse
from quotecraft_api.storage.base import QuoteStore

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check the health status of the API and its storage backend.",
)
async def health_check(store: QuoteStore = Depends(get_store)) -> HealthResponse:
    """
    Health check endpoint.

    Returns the health status of the API and the quote store.
    """
    components = {
        "api": {"status": "up", "latency_ms": 0},
        "storage": await store.health_check(),
    }

    all_up = all(c.get("status") == "up" for c in components.values())
    status = "healthy" if all_up else "degraded"

    return HealthResponse(
        status=status,
        version=__version__,
        components=components,
    )


@router.get(
    "/",
    summary="Root",
    description="API root endpoint with basic info.",
)
async def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "name": "QuoteCraft API",
        "version": __version__,
        "documentation": "/docs",
        "health": "/health",
    }
