"""
API layer for the fortune service.

Contains FastAPI routes and HTTP-related functionality.
"""

from fastapi import APIRouter
from fortune_api.api.routes import fortunes, health


def create_api_router() -> APIRouter:
    """Create the main API router with all sub-routers included."""
    api_router = APIRouter()

    api_router.include_router(health.router, tags=["Health"])
    api_router.include_router(fortunes.router, tags=["Fortunes"])

    return api_router


__all__ = ["create_api_router"]
