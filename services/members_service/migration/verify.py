"""
Post-migration verification: is every legacy identity represented in
``member``?
"""

from dataclasses import dataclass, field

from libs.common.logging import get_logger
from libs.db.introspection import table_exists
from services.members_service.migration.unified_member import UnifiedMemberMigration
from services.members_service.models import AppUser, LegacyMember, Member
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass
class VerificationReport:
    app_users_checked: int = 0
    unmatched_app_users: list[int] = field(default_factory=list)
    athletes_checked: int = 0
    unmatched_athletes: list[int] = field(default_factory=list)
    legacy_members_remaining: int = 0
    unmigrated_legacy_members: list[int] = field(default_factory=list)

    @property
    def all_migrated(self) -> bool:
        return not (
            self.unmatched_app_users
            or self.unmatched_athletes
            or self.unmigrated_legacy_members
        )

    def summary_lines(self) -> list[str]:
        return [
            f"app_user rows checked: {self.app_users_checked}, "
            f"without member: {len(self.unmatched_app_users)}",
            f"athlete rows checked: {self.athletes_checked}, "
            f"without member: {len(self.unmatched_athletes)}",
            f"legacy members rows remaining: {self.legacy_members_remaining}, "
            f"not yet migrated: {len(self.unmigrated_legacy_members)}",
            "All legacy identities migrated"
            if self.all_migrated
            else "Some legacy identities are not migrated",
        ]


async def verify_unified_member_migration(
    session: AsyncSession, normalize_names: bool = False
) -> VerificationReport:
    """Read-only check. App users match by id or email, athletes by the migration's resolver."""
    report = VerificationReport()
    resolver = UnifiedMemberMigration(session, normalize_names=normalize_names)
    await resolver.load_members()

    member_emails = {
        email.lower() for email in await session.scalars(select(Member.email)) if email
    }

    for user_id, email in (await session.execute(select(AppUser.id, AppUser.email))).all():
        report.app_users_checked += 1
        if user_id not in resolver.member_ids and (email or "").lower() not in member_emails:
            report.unmatched_app_users.append(user_id)

    await resolver.load_athletes()
    for athlete in resolver.athletes.values():
        report.athletes_checked += 1
        if resolver.resolve_athlete(athlete) is None:
            report.unmatched_athletes.append(athlete.id)

    if await table_exists(session, LegacyMember.__tablename__):
        report.legacy_members_remaining = await session.scalar(
            select(func.count()).select_from(LegacyMember)
        )
        legacy_rows = await session.execute(select(LegacyMember.id, LegacyMember.email))
        for legacy_id, email in legacy_rows.all():
            if (email or "").lower() not in member_emails:
                report.unmigrated_legacy_members.append(legacy_id)

    for line in report.summary_lines():
        logger.info(line)
    return report
