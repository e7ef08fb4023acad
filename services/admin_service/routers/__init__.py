"""Admin service routers package."""

from services.admin_service.routers.admins import router as admins_router
from services.admin_service.routers.auth import router as auth_router

__all__ = [
    "admins_router",
    "auth_router",
]
