"""
FastAPI Dependencies

The link store and settings are created once by the application lifespan
and kept on app.state; these dependencies hand them to the endpoints.

Usage in FastAPI:
    @router.get("/endpoint")
    async def endpoint(store: LinkStore = Depends(get_link_store)):
        ...
"""

from fastapi import Request

from shortlink.core.setting import Settings
from shortlink.db.interface import LinkStore


def get_link_store(request: Request) -> LinkStore:
    """Return the link store opened at application startup."""
    return request.app.state.link_store


def get_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings
