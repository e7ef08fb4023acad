"""Member login and self-service profile."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.dependencies import require_member
from libs.auth.models import MEMBER_ROLE, AuthUser
from libs.auth.security import create_access_token, verify_password
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.members_service.models import Member
from services.members_service.schemas import (
    MemberLoginRequest,
    MemberResponse,
    MemberTokenResponse,
)
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/members", tags=["member-auth"])
logger = get_logger(__name__)


@router.post("/login", response_model=ApiResponse[MemberTokenResponse])
async def member_login(
    credentials: MemberLoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Members with a login sign in with their username or email."""
    identifier = credentials.username.strip().lower()
    result = await db.execute(
        select(Member).where(
            or_(
                func.lower(Member.username) == identifier,
                func.lower(Member.email) == identifier,
            ),
            Member.password_hash.is_not(None),
        )
    )
    member = result.scalars().first()

    if member is None or not verify_password(credentials.password, member.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    if not member.is_active or member.status == "archived":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Member account is inactive",
        )

    token = create_access_token(
        member.id, MEMBER_ROLE, email=member.email, username=member.username
    )
    logger.info("Member %s logged in", member.id)
    return ok(
        MemberTokenResponse(token=token, member=MemberResponse.model_validate(member)),
        "Login successful",
    )


@router.get("/me", response_model=ApiResponse[MemberResponse])
async def get_me(
    current_user: Annotated[AuthUser, Depends(require_member)],
    db: AsyncSession = Depends(get_async_db),
):
    member = await db.get(Member, current_user.user_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return ok(MemberResponse.model_validate(member))
