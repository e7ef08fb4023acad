"""Admin members router - CRUD over the unified member table."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.security import hash_password
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.admin_service.dependencies import get_current_admin
from services.members_service.models import Member
from services.members_service.routers._helpers import (
    ensure_member_unique,
    get_family_or_404,
    get_member_or_404,
    member_search_clause,
)
from services.members_service.schemas import MemberCreate, MemberResponse, MemberUpdate
from services.members_service.services.deletion import delete_members
from services.members_service.services.families import refresh_family_activity
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(
    prefix="/api/admin/members",
    tags=["admin-members"],
    dependencies=[Depends(get_current_admin)],
)

REQUIRED_FIELDS = {"first_name", "last_name", "status", "is_active"}


@router.get("", response_model=ApiResponse[List[MemberResponse]])
async def list_members(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    family_id: Optional[int] = Query(None, alias="familyId"),
    include_archived: bool = Query(False, alias="includeArchived"),
    db: AsyncSession = Depends(get_async_db),
):
    """List members. Archived members are hidden unless asked for."""
    query = select(Member)
    if search and search.strip():
        query = query.where(member_search_clause(search))
    if status_filter:
        query = query.where(Member.status == status_filter)
    elif not include_archived:
        query = query.where(Member.status != "archived")
    if family_id is not None:
        query = query.where(Member.family_id == family_id)
    query = query.order_by(Member.last_name, Member.first_name, Member.id)

    result = await db.execute(query)
    return ok([MemberResponse.model_validate(m) for m in result.scalars().all()])


@router.get("/{member_id}", response_model=ApiResponse[MemberResponse])
async def get_member(member_id: int, db: AsyncSession = Depends(get_async_db)):
    member = await get_member_or_404(db, member_id)
    return ok(MemberResponse.model_validate(member))


@router.post(
    "",
    response_model=ApiResponse[MemberResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_member(
    member_in: MemberCreate,
    db: AsyncSession = Depends(get_async_db),
):
    await ensure_member_unique(db, member_in.email, member_in.username)
    if member_in.family_id is not None:
        await get_family_or_404(db, member_in.family_id)

    data = member_in.model_dump(exclude={"password"})
    member = Member(**data)
    if member_in.password:
        member.password_hash = hash_password(member_in.password)
    db.add(member)
    await db.flush()
    await refresh_family_activity(db, member_ids=[member.id])
    await db.commit()
    await db.refresh(member)

    logger.info("Member %s created", member.id)
    return ok(MemberResponse.model_validate(member), "Member created successfully")


@router.put("/{member_id}", response_model=ApiResponse[MemberResponse])
async def update_member(
    member_id: int,
    member_in: MemberUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    member = await get_member_or_404(db, member_id)
    updates = member_in.model_dump(exclude_unset=True)
    await ensure_member_unique(
        db, updates.get("email"), updates.get("username"), exclude_id=member.id
    )
    if updates.get("family_id") is not None:
        await get_family_or_404(db, updates["family_id"])

    previous_family = member.family_id
    password = updates.pop("password", None)
    if password:
        member.password_hash = hash_password(password)
    for field, value in updates.items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(member, field, value)

    await db.flush()
    await refresh_family_activity(db, family_ids=[previous_family], member_ids=[member.id])
    await db.commit()
    await db.refresh(member)
    return ok(MemberResponse.model_validate(member), "Member updated successfully")


@router.patch("/{member_id}/archive", response_model=ApiResponse[MemberResponse])
async def archive_member(member_id: int, db: AsyncSession = Depends(get_async_db)):
    member = await get_member_or_404(db, member_id)
    member.status = "archived"
    member.is_active = False
    await db.flush()
    await refresh_family_activity(db, member_ids=[member.id])
    await db.commit()
    await db.refresh(member)

    logger.info("Member %s archived", member_id)
    return ok(MemberResponse.model_validate(member), "Member archived successfully")


@router.delete("/{member_id}", response_model=ApiResponse[None])
async def delete_member(member_id: int, db: AsyncSession = Depends(get_async_db)):
    """Hard delete a member together with enrollments and relationships."""
    member = await get_member_or_404(db, member_id)
    family_id = member.family_id

    await delete_members(db, [member_id])
    await refresh_family_activity(db, family_ids=[family_id])
    await db.commit()

    logger.info("Member %s deleted", member_id)
    return ok(message="Member deleted successfully")
