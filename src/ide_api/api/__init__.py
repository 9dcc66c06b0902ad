"""API routes module."""
from fastapi import APIRouter

from . import health, folders, projects


def create_api_router() -> APIRouter:
    """
    Create and configure the main API router.

    Returns:
        Configured APIRouter instance
    """
    router = APIRouter()

    # Register all route modules
    router.include_router(health.router, tags=["Health"])
    router.include_router(folders.router, tags=["Folders"])
    router.include_router(projects.router, tags=["Projects"])

    return router


__all__ = ["create_api_router"]
