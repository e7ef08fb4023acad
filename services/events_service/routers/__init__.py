"""Events service routers package."""

from services.events_service.routers.admin import router as admin_router
from services.events_service.routers.public import router as public_router

__all__ = ["admin_router", "public_router"]
