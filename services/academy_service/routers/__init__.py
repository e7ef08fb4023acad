"""Academy service routers package."""

from services.academy_service.routers.categories import router as categories_router
from services.academy_service.routers.enrollments import router as enrollments_router
from services.academy_service.routers.programs import router as programs_router
from services.academy_service.routers.public import router as public_router

__all__ = [
    "categories_router",
    "enrollments_router",
    "programs_router",
    "public_router",
]
