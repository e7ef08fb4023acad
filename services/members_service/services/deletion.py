"""
Hard deletion of members and families.

Dependent rows are removed explicitly rather than relying on ON DELETE
CASCADE, so the behaviour is the same on databases that do not enforce
foreign keys.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from services.academy_service.models import MemberProgram
from services.members_service.models import (
    EmergencyContact,
    Family,
    FamilyGuardian,
    Member,
    ParentGuardianAuthority,
    UserRole,
)
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class DeletionReport:
    member_ids: list[int] = field(default_factory=list)
    family_ids: list[int] = field(default_factory=list)


async def delete_members(session: AsyncSession, member_ids: Iterable[int]) -> list[int]:
    """Delete members and every row that references them. Does not commit."""
    ids = sorted(set(member_ids))
    if not ids:
        return []

    await session.execute(delete(MemberProgram).where(MemberProgram.member_id.in_(ids)))
    await session.execute(
        delete(ParentGuardianAuthority).where(
            or_(
                ParentGuardianAuthority.parent_member_id.in_(ids),
                ParentGuardianAuthority.child_member_id.in_(ids),
            )
        )
    )
    await session.execute(delete(FamilyGuardian).where(FamilyGuardian.member_id.in_(ids)))
    await session.execute(delete(EmergencyContact).where(EmergencyContact.member_id.in_(ids)))
    await session.execute(delete(UserRole).where(UserRole.member_id.in_(ids)))
    await session.execute(
        update(Family)
        .where(Family.primary_member_id.in_(ids))
        .values(primary_member_id=None)
    )
    await session.execute(delete(Member).where(Member.id.in_(ids)))
    return ids


async def delete_member_by_email(
    session: AsyncSession, email: str, dry_run: bool = False
) -> Optional[DeletionReport]:
    """
    Delete the member with ``email``. When they are a family's primary
    member or guardian, the family and its other members go too.

    Returns None when no member has that email. Commits unless ``dry_run``.
    """
    member = (
        await session.execute(
            select(Member).where(func.lower(Member.email) == email.strip().lower())
        )
    ).scalars().first()
    if member is None:
        return None

    family_ids = set(
        await session.scalars(
            select(Family.id).where(Family.primary_member_id == member.id)
        )
    )
    family_ids.update(
        await session.scalars(
            select(FamilyGuardian.family_id).where(FamilyGuardian.member_id == member.id)
        )
    )

    member_ids = {member.id}
    if family_ids:
        member_ids.update(
            await session.scalars(select(Member.id).where(Member.family_id.in_(family_ids)))
        )

    report = DeletionReport(member_ids=sorted(member_ids), family_ids=sorted(family_ids))
    if dry_run:
        return report

    try:
        await delete_members(session, member_ids)
        if family_ids:
            await session.execute(
                delete(FamilyGuardian).where(FamilyGuardian.family_id.in_(family_ids))
            )
            await session.execute(delete(Family).where(Family.id.in_(family_ids)))
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    return report
