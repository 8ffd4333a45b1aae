"""API route handlers.

This module exports all API routers for the FastAPI application.
"""

from .admin import router as admin_router
from .auth import router as auth_router
from .health import router as health_router
from .items import router as items_router
from .swaps import router as swaps_router
from .users import router as users_router

__all__ = [
    "health_router",
    "auth_router",
    "items_router",
    "users_router",
    "swaps_router",
    "admin_router",
]
