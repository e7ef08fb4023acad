"""Admin login."""

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.models import ADMIN_ROLE
from libs.auth.security import create_access_token, verify_password
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.admin_service.models import Admin
from services.admin_service.schemas import AdminResponse, LoginRequest, TokenResponse
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/admin", tags=["admin-auth"])
logger = get_logger(__name__)


@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Exchange username (or email) and password for an access token."""
    identifier = credentials.username.strip()
    result = await db.execute(
        select(Admin).where(
            or_(
                Admin.username == identifier,
                func.lower(Admin.email) == identifier.lower(),
            )
        )
    )
    admin = result.scalars().first()

    if admin is None or not verify_password(credentials.password, admin.password_hash):
        logger.info(
            "Admin login failed",
            extra={"extra_fields": {"identifier": identifier}},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    token = create_access_token(
        admin.id,
        ADMIN_ROLE,
        email=admin.email,
        username=admin.username,
        is_master=admin.is_master,
    )
    logger.info("Admin %s logged in", admin.username)
    return ok(
        TokenResponse(token=token, admin=AdminResponse.model_validate(admin)),
        "Login successful",
    )
