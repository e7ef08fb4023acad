"""Family bookkeeping shared by the member and family routers."""

from typing import Iterable, Optional

from services.members_service.models import Member
from services.members_service.services.member_service import family_activity
from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession


async def refresh_family_activity(
    session: AsyncSession,
    family_ids: Iterable[Optional[int]] = (),
    member_ids: Iterable[int] = (),
) -> int:
    """
    Recompute ``family_is_active`` for the given families and members.

    Returns the number of members whose flag changed. Does not commit.
    """
    families = {fid for fid in family_ids if fid is not None}
    members = set(member_ids)
    if not families and not members:
        return 0
    if members:
        # Whole families are recomputed together
        families.update(
            fid
            for fid in await session.scalars(
                select(Member.family_id).where(Member.id.in_(members))
            )
            if fid is not None
        )

    conditions = []
    if families:
        conditions.append(Member.family_id.in_(families))
    if members:
        conditions.append(Member.id.in_(members))

    rows = (
        await session.execute(
            select(
                Member.id,
                Member.family_id,
                Member.is_active,
                Member.status,
                Member.family_is_active,
            ).where(or_(*conditions))
        )
    ).all()
    computed = family_activity((r.id, r.family_id, r.is_active, r.status) for r in rows)

    changed = 0
    for row in rows:
        if row.family_is_active != computed[row.id]:
            await session.execute(
                update(Member)
                .where(Member.id == row.id)
                .values(family_is_active=computed[row.id], updated_at=Member.updated_at)
            )
            changed += 1
    return changed
