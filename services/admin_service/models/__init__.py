"""Admin Service models package."""

from services.admin_service.models.core import Admin

__all__ = ["Admin"]
