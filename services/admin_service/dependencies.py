"""Request dependencies that resolve the calling admin account."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.admin_service.models import Admin
from sqlalchemy.ext.asyncio import AsyncSession


async def get_current_admin(
    current_user: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
) -> Admin:
    """
    Load the admin named by the token. A deleted admin's token stops
    working immediately.
    """
    admin = await db.get(Admin, current_user.user_id)
    if admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin account no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return admin


async def require_master_admin(
    admin: Annotated[Admin, Depends(get_current_admin)],
) -> Admin:
    if not admin.is_master:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Master admin privileges required",
        )
    return admin
