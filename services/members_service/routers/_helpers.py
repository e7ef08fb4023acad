"""Shared helper functions for members service routers."""

from typing import Optional

from fastapi import HTTPException, status
from services.members_service.models import Family, Member
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession


async def get_member_or_404(db: AsyncSession, member_id: int) -> Member:
    member = await db.get(Member, member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


async def get_family_or_404(db: AsyncSession, family_id: int) -> Family:
    family = await db.get(Family, family_id)
    if family is None:
        raise HTTPException(status_code=404, detail="Family not found")
    return family


async def ensure_member_unique(
    db: AsyncSession,
    email: Optional[str],
    username: Optional[str],
    exclude_id: Optional[int] = None,
) -> None:
    """Raise 409 when another member already uses the email or username."""
    if email:
        query = select(Member.id).where(func.lower(Member.email) == email.lower())
        if exclude_id is not None:
            query = query.where(Member.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A member with this email already exists",
            )
    if username:
        query = select(Member.id).where(func.lower(Member.username) == username.lower())
        if exclude_id is not None:
            query = query.where(Member.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A member with this username already exists",
            )


def member_search_clause(search: str):
    pattern = f"%{search.strip().lower()}%"
    full_name = func.lower(Member.first_name + " " + Member.last_name)
    return or_(
        func.lower(Member.first_name).like(pattern),
        func.lower(Member.last_name).like(pattern),
        full_name.like(pattern),
        func.lower(Member.email).like(pattern),
        func.lower(Member.username).like(pattern),
    )
