"""Admin Service schemas package."""

from services.admin_service.schemas.main import (
    AdminCreate,
    AdminResponse,
    AdminUpdate,
    LoginRequest,
    TokenResponse,
)

__all__ = [
    "AdminCreate",
    "AdminResponse",
    "AdminUpdate",
    "LoginRequest",
    "TokenResponse",
]
