"""Admin families router - households, their members and guardians."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.admin_service.dependencies import get_current_admin
from services.members_service.models import Family, FamilyGuardian, Member
from services.members_service.routers._helpers import get_family_or_404
from services.members_service.schemas import (
    FamilyCreate,
    FamilyDetailResponse,
    FamilyResponse,
    FamilyUpdate,
    GuardianIn,
    GuardianResponse,
    MemberResponse,
)
from services.members_service.services.families import refresh_family_activity
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(
    prefix="/api/admin/families",
    tags=["admin-families"],
    dependencies=[Depends(get_current_admin)],
)


async def _require_members(db: AsyncSession, member_ids: set[int]) -> None:
    if not member_ids:
        return
    found = set(await db.scalars(select(Member.id).where(Member.id.in_(member_ids))))
    missing = sorted(member_ids - found)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Members not found: {', '.join(str(m) for m in missing)}",
        )


async def _family_detail(db: AsyncSession, family: Family) -> FamilyDetailResponse:
    members = (
        await db.execute(
            select(Member)
            .where(Member.family_id == family.id)
            .order_by(Member.date_of_birth.is_(None), Member.date_of_birth, Member.id)
        )
    ).scalars().all()
    guardian_rows = (
        await db.execute(
            select(FamilyGuardian, Member)
            .outerjoin(Member, Member.id == FamilyGuardian.member_id)
            .where(FamilyGuardian.family_id == family.id)
            .order_by(FamilyGuardian.is_primary.desc(), FamilyGuardian.id)
        )
    ).all()

    guardians = [
        GuardianResponse(
            id=guardian.id,
            member_id=guardian.member_id,
            is_primary=guardian.is_primary,
            first_name=member.first_name if member else None,
            last_name=member.last_name if member else None,
            email=member.email if member else None,
        )
        for guardian, member in guardian_rows
    ]
    response = FamilyDetailResponse.model_validate(family)
    response.members = [MemberResponse.model_validate(m) for m in members]
    response.guardians = guardians
    response.member_count = len(members)
    return response


@router.get("", response_model=ApiResponse[List[FamilyResponse]])
async def list_families(
    search: Optional[str] = Query(None),
    include_archived: bool = Query(False, alias="includeArchived"),
    db: AsyncSession = Depends(get_async_db),
):
    counts = (
        select(Member.family_id, func.count(Member.id).label("member_count"))
        .where(Member.family_id.is_not(None))
        .group_by(Member.family_id)
        .subquery()
    )
    query = select(Family, func.coalesce(counts.c.member_count, 0)).outerjoin(
        counts, counts.c.family_id == Family.id
    )
    if search and search.strip():
        query = query.where(
            func.lower(Family.family_name).like(f"%{search.strip().lower()}%")
        )
    if not include_archived:
        query = query.where(Family.archived.is_(False))
    query = query.order_by(Family.family_name, Family.id)

    families = []
    for family, member_count in (await db.execute(query)).all():
        response = FamilyResponse.model_validate(family)
        response.member_count = member_count
        families.append(response)
    return ok(families)


@router.get("/{family_id}", response_model=ApiResponse[FamilyDetailResponse])
async def get_family(family_id: int, db: AsyncSession = Depends(get_async_db)):
    family = await get_family_or_404(db, family_id)
    return ok(await _family_detail(db, family))


@router.post(
    "",
    response_model=ApiResponse[FamilyDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_family(
    family_in: FamilyCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Create a family, attach members to it and record its guardians.

    The primary member defaults to the first guardian flagged primary.
    Guardians are attached to the family as members too.
    """
    guardian_ids = {g.member_id for g in family_in.guardians}
    member_ids = set(family_in.member_ids) | guardian_ids
    if family_in.primary_member_id is not None:
        member_ids.add(family_in.primary_member_id)
    await _require_members(db, member_ids)

    primary_member_id = family_in.primary_member_id
    if primary_member_id is None:
        primary_member_id = next(
            (g.member_id for g in family_in.guardians if g.is_primary), None
        )

    family = Family(
        family_name=family_in.family_name,
        facility_id=family_in.facility_id,
        primary_member_id=primary_member_id,
    )
    db.add(family)
    await db.flush()

    guardians = list(family_in.guardians)
    if primary_member_id is not None and primary_member_id not in guardian_ids:
        guardians.insert(0, _primary_guardian(primary_member_id))
    for guardian in guardians:
        db.add(
            FamilyGuardian(
                family_id=family.id,
                member_id=guardian.member_id,
                is_primary=guardian.is_primary or guardian.member_id == primary_member_id,
            )
        )

    previous_families = set(
        await db.scalars(select(Member.family_id).where(Member.id.in_(member_ids)))
    )
    for member in (
        await db.execute(select(Member).where(Member.id.in_(member_ids)))
    ).scalars():
        member.family_id = family.id
    await db.flush()
    await refresh_family_activity(db, family_ids=previous_families | {family.id})
    await db.commit()
    await db.refresh(family)

    logger.info("Family %s created with %d members", family.id, len(member_ids))
    return ok(await _family_detail(db, family), "Family created successfully")


def _primary_guardian(member_id: int) -> GuardianIn:
    return GuardianIn(member_id=member_id, is_primary=True)


@router.put("/{family_id}", response_model=ApiResponse[FamilyDetailResponse])
async def update_family(
    family_id: int,
    family_in: FamilyUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    family = await get_family_or_404(db, family_id)
    updates = family_in.model_dump(exclude_unset=True, exclude={"add_member_ids"})

    add_ids = set(family_in.add_member_ids)
    if updates.get("primary_member_id") is not None:
        add_ids.add(updates["primary_member_id"])
    await _require_members(db, add_ids)

    for field, value in updates.items():
        if value is None and field in ("family_name", "archived"):
            continue
        setattr(family, field, value)

    previous_families = set(
        await db.scalars(select(Member.family_id).where(Member.id.in_(add_ids)))
    ) if add_ids else set()
    if add_ids:
        for member in (
            await db.execute(select(Member).where(Member.id.in_(add_ids)))
        ).scalars():
            member.family_id = family.id

    await db.flush()
    await refresh_family_activity(db, family_ids=previous_families | {family.id})
    await db.commit()
    await db.refresh(family)
    return ok(await _family_detail(db, family), "Family updated successfully")


@router.delete(
    "/{family_id}/members/{member_id}",
    response_model=ApiResponse[FamilyDetailResponse],
)
async def remove_family_member(
    family_id: int,
    member_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Detach a member from a family. The member record is kept."""
    family = await get_family_or_404(db, family_id)
    member = await db.get(Member, member_id)
    if member is None or member.family_id != family.id:
        raise HTTPException(status_code=404, detail="Member not found in this family")

    member.family_id = None
    await db.execute(
        delete(FamilyGuardian).where(
            FamilyGuardian.family_id == family.id,
            FamilyGuardian.member_id == member_id,
        )
    )
    if family.primary_member_id == member_id:
        family.primary_member_id = None

    await db.flush()
    await refresh_family_activity(db, family_ids=[family.id], member_ids=[member_id])
    await db.commit()
    await db.refresh(family)

    logger.info("Member %s removed from family %s", member_id, family_id)
    return ok(await _family_detail(db, family), "Member removed from family")
