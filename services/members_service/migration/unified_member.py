"""
Fold the legacy identity tables into the unified ``member`` table.

Legacy ``members`` accounts become ``app_user`` rows, ``app_user`` rows
become members with the same id, athletes without a login become new
members, and every table that pointed at a legacy key gets the matching
``member_id``. The whole run is one transaction on the caller's session:
any failure rolls back every step of that run.

Athletes without a login are matched to members by
(first_name, last_name, date_of_birth, family_id). The match is exact
unless ``normalize_names`` is set, in which case names are trimmed and
case folded. Rows the matcher cannot place are listed in the report.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from libs.common.datetime_utils import latest, utc_now
from libs.common.logging import get_logger
from libs.db.introspection import dialect_name, table_exists
from services.academy_service.models import ClassIteration, MemberProgram, Program
from services.members_service.models import (
    AppUser,
    Athlete,
    AthleteProgram,
    EmergencyContact,
    Facility,
    Family,
    FamilyGuardian,
    LegacyMember,
    Member,
    ParentGuardianAuthority,
    UserRole,
)
from services.members_service.services.member_service import (
    athlete_is_active,
    family_activity,
    guardian_child_pairs,
    identity_key,
    map_athlete_status,
    split_full_name,
)
from sqlalchemy import select, text, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

logger = get_logger(__name__)


@dataclass
class UnmatchedRow:
    table: str
    row_id: int
    reason: str


@dataclass
class MigrationReport:
    dry_run: bool = False
    legacy_accounts_created: int = 0
    users_migrated: int = 0
    children_migrated: int = 0
    children_already_present: int = 0
    members_merged: int = 0
    enrollments_migrated: int = 0
    enrollments_already_present: int = 0
    enrollments_unresolved: int = 0
    guardians_linked: int = 0
    guardians_unresolved: int = 0
    primary_members_linked: int = 0
    primary_members_unresolved: int = 0
    emergency_contacts_linked: int = 0
    emergency_contacts_unresolved: int = 0
    user_roles_linked: int = 0
    user_roles_unresolved: int = 0
    family_flags_updated: int = 0
    authorities_created: int = 0
    skipped_steps: list[str] = field(default_factory=list)
    unmatched: list[UnmatchedRow] = field(default_factory=list)

    def summary_lines(self) -> list[str]:
        lines = [
            f"Legacy member accounts copied to app_user: {self.legacy_accounts_created}",
            f"app_user rows migrated: {self.users_migrated}",
            f"Child athletes migrated: {self.children_migrated} "
            f"({self.children_already_present} already present)",
            f"Members merged with athlete data: {self.members_merged}",
            f"Enrollments migrated: {self.enrollments_migrated} "
            f"({self.enrollments_already_present} already present, "
            f"{self.enrollments_unresolved} unresolved)",
            f"Family guardians linked: {self.guardians_linked} "
            f"({self.guardians_unresolved} unresolved)",
            f"Family primary members linked: {self.primary_members_linked} "
            f"({self.primary_members_unresolved} unresolved)",
            f"Emergency contacts linked: {self.emergency_contacts_linked} "
            f"({self.emergency_contacts_unresolved} unresolved)",
            f"User roles linked: {self.user_roles_linked} "
            f"({self.user_roles_unresolved} unresolved)",
            f"family_is_active flags changed: {self.family_flags_updated}",
            f"Parent/guardian authorities created: {self.authorities_created}",
        ]
        if self.skipped_steps:
            lines.append("Skipped: " + ", ".join(self.skipped_steps))
        return lines


class UnifiedMemberMigration:
    """One migration run. Steps are methods so each can be exercised alone."""

    def __init__(
        self,
        session: AsyncSession,
        normalize_names: bool = False,
        today: Optional[date] = None,
    ):
        self.session = session
        self.normalize_names = normalize_names
        self.today = today
        self.report = MigrationReport()
        self.member_ids: set[int] = set()
        self.identity_index: dict[tuple, int] = {}
        self.athletes: dict[int, Athlete] = {}
        self.has_athlete_table = False

    # -- member index ---------------------------------------------------

    def _key(self, first_name, last_name, date_of_birth, family_id) -> tuple:
        return identity_key(
            first_name, last_name, date_of_birth, family_id, normalize=self.normalize_names
        )

    async def load_members(self) -> None:
        rows = await self.session.execute(
            select(
                Member.id,
                Member.first_name,
                Member.last_name,
                Member.date_of_birth,
                Member.family_id,
            ).order_by(Member.id)
        )
        self.member_ids = set()
        self.identity_index = {}
        for member_id, first_name, last_name, date_of_birth, family_id in rows:
            self.member_ids.add(member_id)
            # Lowest id wins when several members share a key
            self.identity_index.setdefault(
                self._key(first_name, last_name, date_of_birth, family_id), member_id
            )

    def resolve_athlete(self, athlete: Optional[Athlete]) -> Optional[int]:
        """Member for an athlete: by login id first, then by identity key."""
        if athlete is None:
            return None
        if athlete.user_id is not None and athlete.user_id in self.member_ids:
            return athlete.user_id
        return self.identity_index.get(
            self._key(
                athlete.first_name,
                athlete.last_name,
                athlete.date_of_birth,
                athlete.family_id,
            )
        )

    def _unmatched(self, table: str, row_id: int, reason: str) -> None:
        self.report.unmatched.append(UnmatchedRow(table, row_id, reason))

    # -- steps ----------------------------------------------------------

    async def copy_legacy_member_accounts(self) -> None:
        """Step 0: legacy ``members`` accounts without an app_user get one."""
        if not await table_exists(self.session, LegacyMember.__tablename__):
            self.report.skipped_steps.append("legacy members (table absent)")
            return

        known_emails = {
            email.lower()
            for email in await self.session.scalars(select(AppUser.email))
            if email
        }
        facility_id = await self.session.scalar(
            select(Facility.id).order_by(Facility.id).limit(1)
        )
        legacy_rows = await self.session.scalars(
            select(LegacyMember).order_by(LegacyMember.id)
        )
        now = utc_now()
        for legacy in legacy_rows:
            if not legacy.email or legacy.email.lower() in known_emails:
                continue
            full_name = " ".join(
                part for part in (legacy.first_name, legacy.last_name) if part
            )
            self.session.add(
                AppUser(
                    facility_id=facility_id,
                    role="PARENT_GUARDIAN",
                    email=legacy.email,
                    phone=legacy.phone,
                    full_name=full_name or "Member",
                    password_hash=legacy.password_hash,
                    is_active=legacy.account_status == "active",
                    created_at=legacy.created_at or now,
                    updated_at=legacy.updated_at or now,
                )
            )
            known_emails.add(legacy.email.lower())
            self.report.legacy_accounts_created += 1
        await self.session.flush()

    async def migrate_app_users(self) -> None:
        """Step 1: every app_user becomes a member with the same id."""
        users = await self.session.scalars(select(AppUser).order_by(AppUser.id))
        now = utc_now()
        for user in users:
            if user.id in self.member_ids:
                continue
            first_name, last_name = split_full_name(
                user.full_name, fallback=user.email.split("@")[0]
            )
            active = user.is_active is not False
            self.session.add(
                Member(
                    id=user.id,
                    facility_id=user.facility_id,
                    first_name=first_name,
                    last_name=last_name,
                    email=user.email,
                    phone=user.phone,
                    address=user.address,
                    password_hash=user.password_hash,
                    username=user.username,
                    is_active=active,
                    status="legacy" if active else "archived",
                    created_at=user.created_at or now,
                    updated_at=user.updated_at or now,
                )
            )
            self.report.users_migrated += 1
        await self.session.flush()

        if self.report.users_migrated and await dialect_name(self.session) == "postgresql":
            # Explicit ids bypass the serial; move it past them
            await self.session.execute(
                text(
                    "SELECT setval(pg_get_serial_sequence('member', 'id'), "
                    "(SELECT COALESCE(MAX(id), 1) FROM member))"
                )
            )
        await self.load_members()

    async def load_athletes(self) -> None:
        self.has_athlete_table = await table_exists(self.session, Athlete.__tablename__)
        if not self.has_athlete_table:
            self.report.skipped_steps.append("athletes (table absent)")
            return
        athletes = await self.session.scalars(select(Athlete).order_by(Athlete.id))
        self.athletes = {athlete.id: athlete for athlete in athletes}

    async def migrate_child_athletes(self) -> None:
        """Step 2: athletes without a login become members unless already matched."""
        now = utc_now()
        for athlete in self.athletes.values():
            if athlete.user_id is not None:
                continue
            key = self._key(
                athlete.first_name,
                athlete.last_name,
                athlete.date_of_birth,
                athlete.family_id,
            )
            if key in self.identity_index:
                self.report.children_already_present += 1
                continue

            member = Member(
                facility_id=athlete.facility_id,
                family_id=athlete.family_id,
                first_name=athlete.first_name,
                last_name=athlete.last_name,
                date_of_birth=athlete.date_of_birth,
                medical_notes=athlete.medical_notes,
                internal_flags=athlete.internal_flags,
                status=map_athlete_status(athlete.status),
                is_active=athlete_is_active(athlete.status),
                created_at=athlete.created_at or now,
                updated_at=athlete.updated_at or now,
            )
            self.session.add(member)
            await self.session.flush()
            self.member_ids.add(member.id)
            self.identity_index[key] = member.id
            self.report.children_migrated += 1

    async def merge_athlete_logins(self) -> None:
        """Step 3: athletes with a login enrich the member that shares their id."""
        linked = [a for a in self.athletes.values() if a.user_id is not None]
        if not linked:
            return

        rows = await self.session.execute(
            select(Member).where(Member.id.in_(sorted({a.user_id for a in linked})))
        )
        members = {member.id: member for member in rows.scalars()}
        merged = set()
        for athlete in linked:
            member = members.get(athlete.user_id)
            if member is None:
                self._unmatched("athlete", athlete.id, f"no member with id {athlete.user_id}")
                continue

            values = {
                "family_id": athlete.family_id,
                "date_of_birth": member.date_of_birth or athlete.date_of_birth,
                "medical_notes": member.medical_notes or athlete.medical_notes,
                "internal_flags": member.internal_flags or athlete.internal_flags,
                "status": map_athlete_status(athlete.status, default=member.status),
                "updated_at": latest(member.updated_at, athlete.updated_at) or utc_now(),
            }
            await self.session.execute(
                update(Member).where(Member.id == member.id).values(**values)
            )
            for attr, value in values.items():
                set_committed_value(member, attr, value)
            merged.add(member.id)

        self.report.members_merged = len(merged)
        await self.load_members()

    async def migrate_enrollments(self) -> None:
        """Step 4: athlete_program rows become member_program rows."""
        if not self.has_athlete_table or not await table_exists(
            self.session, AthleteProgram.__tablename__
        ):
            self.report.skipped_steps.append("enrollments (athlete_program absent)")
            return

        existing = set(
            (
                await self.session.execute(
                    select(
                        MemberProgram.member_id,
                        MemberProgram.program_id,
                        MemberProgram.iteration_id,
                    )
                )
            ).all()
        )
        program_ids = set(await self.session.scalars(select(Program.id)))
        iteration_ids = set(await self.session.scalars(select(ClassIteration.id)))

        enrollments = await self.session.scalars(
            select(AthleteProgram).order_by(AthleteProgram.id)
        )
        now = utc_now()
        for enrollment in enrollments:
            member_id = self.resolve_athlete(self.athletes.get(enrollment.athlete_id))
            if member_id is None:
                self.report.enrollments_unresolved += 1
                self._unmatched(
                    "athlete_program",
                    enrollment.id,
                    f"athlete {enrollment.athlete_id} has no matching member",
                )
                continue
            if enrollment.program_id not in program_ids or (
                enrollment.iteration_id is not None
                and enrollment.iteration_id not in iteration_ids
            ):
                self.report.enrollments_unresolved += 1
                self._unmatched(
                    "athlete_program", enrollment.id, "program or iteration no longer exists"
                )
                continue

            key = (member_id, enrollment.program_id, enrollment.iteration_id)
            if key in existing:
                self.report.enrollments_already_present += 1
                continue

            self.session.add(
                MemberProgram(
                    member_id=member_id,
                    program_id=enrollment.program_id,
                    iteration_id=enrollment.iteration_id,
                    days_per_week=enrollment.days_per_week,
                    selected_days=enrollment.selected_days,
                    created_at=enrollment.created_at or now,
                    updated_at=enrollment.updated_at or now,
                )
            )
            existing.add(key)
            self.report.enrollments_migrated += 1
        await self.session.flush()

    async def link_families(self) -> None:
        """Step 5: guardian and primary-member references move to member ids."""
        guardians = (
            await self.session.execute(
                select(FamilyGuardian.id, FamilyGuardian.user_id).where(
                    FamilyGuardian.user_id.is_not(None),
                    FamilyGuardian.member_id.is_(None),
                )
            )
        ).all()
        for guardian_id, user_id in guardians:
            if user_id not in self.member_ids:
                self.report.guardians_unresolved += 1
                self._unmatched("family_guardian", guardian_id, f"no member with id {user_id}")
                continue
            await self.session.execute(
                update(FamilyGuardian)
                .where(FamilyGuardian.id == guardian_id)
                .values(member_id=user_id)
            )
            self.report.guardians_linked += 1

        families = (
            await self.session.execute(
                select(Family.id, Family.primary_user_id).where(
                    Family.primary_user_id.is_not(None),
                    Family.primary_member_id.is_(None),
                )
            )
        ).all()
        for family_id, primary_user_id in families:
            if primary_user_id not in self.member_ids:
                self.report.primary_members_unresolved += 1
                self._unmatched("family", family_id, f"no member with id {primary_user_id}")
                continue
            await self.session.execute(
                update(Family)
                .where(Family.id == family_id)
                .values(primary_member_id=primary_user_id)
            )
            self.report.primary_members_linked += 1

    async def link_emergency_contacts(self) -> None:
        """Step 6: emergency contacts follow their athlete to the member."""
        contacts = (
            await self.session.execute(
                select(EmergencyContact.id, EmergencyContact.athlete_id).where(
                    EmergencyContact.athlete_id.is_not(None),
                    EmergencyContact.member_id.is_(None),
                )
            )
        ).all()
        for contact_id, athlete_id in contacts:
            member_id = self.resolve_athlete(self.athletes.get(athlete_id))
            if member_id is None:
                self.report.emergency_contacts_unresolved += 1
                self._unmatched(
                    "emergency_contact", contact_id, f"athlete {athlete_id} has no matching member"
                )
                continue
            await self.session.execute(
                update(EmergencyContact)
                .where(EmergencyContact.id == contact_id)
                .values(member_id=member_id)
            )
            self.report.emergency_contacts_linked += 1

    async def link_user_roles(self) -> None:
        """Step 7: role grants move from app_user ids to member ids."""
        if not await table_exists(self.session, UserRole.__tablename__):
            self.report.skipped_steps.append("user roles (table absent)")
            return

        roles = (
            await self.session.execute(
                select(UserRole.id, UserRole.user_id).where(
                    UserRole.user_id.is_not(None), UserRole.member_id.is_(None)
                )
            )
        ).all()
        for role_id, user_id in roles:
            if user_id not in self.member_ids:
                self.report.user_roles_unresolved += 1
                self._unmatched("user_role", role_id, f"no member with id {user_id}")
                continue
            await self.session.execute(
                update(UserRole).where(UserRole.id == role_id).values(member_id=user_id)
            )
            self.report.user_roles_linked += 1

    async def calculate_family_active_status(self) -> None:
        """Step 8: recompute the derived family_is_active flag for every member."""
        rows = (
            await self.session.execute(
                select(
                    Member.id,
                    Member.family_id,
                    Member.is_active,
                    Member.status,
                    Member.family_is_active,
                )
            )
        ).all()
        current = {row.id: row.family_is_active for row in rows}
        computed = family_activity(
            (row.id, row.family_id, row.is_active, row.status) for row in rows
        )

        for flag in (True, False):
            ids = [mid for mid, value in computed.items() if value is flag and current[mid] != flag]
            if not ids:
                continue
            # Derived flag; leave updated_at alone
            await self.session.execute(
                update(Member)
                .where(Member.id.in_(ids))
                .values(family_is_active=flag, updated_at=Member.updated_at)
            )
            self.report.family_flags_updated += len(ids)

    async def create_guardian_authorities(self) -> None:
        """Step 9: guardians get legal authority over the minors in their family."""
        guardians = (
            await self.session.execute(
                select(FamilyGuardian.family_id, FamilyGuardian.member_id).where(
                    FamilyGuardian.member_id.is_not(None)
                )
            )
        ).all()
        members = (
            await self.session.execute(
                select(Member.id, Member.family_id, Member.date_of_birth)
            )
        ).all()
        existing = set(
            (
                await self.session.execute(
                    select(
                        ParentGuardianAuthority.parent_member_id,
                        ParentGuardianAuthority.child_member_id,
                    )
                )
            ).all()
        )

        pairs = guardian_child_pairs(
            [tuple(g) for g in guardians], [tuple(m) for m in members], today=self.today
        )
        for parent_id, child_id in sorted(pairs - existing):
            self.session.add(
                ParentGuardianAuthority(
                    parent_member_id=parent_id,
                    child_member_id=child_id,
                    has_legal_authority=True,
                    relationship="Parent/Guardian",
                )
            )
            self.report.authorities_created += 1
        await self.session.flush()

    async def run(self) -> MigrationReport:
        logger.info("Starting unified member migration")
        await self.load_members()

        await self.copy_legacy_member_accounts()
        logger.info("Step 0: %d legacy member accounts copied", self.report.legacy_accounts_created)
        await self.migrate_app_users()
        logger.info("Step 1: %d app_user rows migrated", self.report.users_migrated)
        await self.load_athletes()
        await self.migrate_child_athletes()
        logger.info("Step 2: %d child athletes migrated", self.report.children_migrated)
        await self.merge_athlete_logins()
        logger.info("Step 3: %d members merged with athlete data", self.report.members_merged)
        await self.migrate_enrollments()
        logger.info("Step 4: %d enrollments migrated", self.report.enrollments_migrated)
        await self.link_families()
        logger.info("Step 5: %d guardians linked", self.report.guardians_linked)
        await self.link_emergency_contacts()
        logger.info("Step 6: %d emergency contacts linked", self.report.emergency_contacts_linked)
        await self.link_user_roles()
        logger.info("Step 7: %d user roles linked", self.report.user_roles_linked)
        await self.calculate_family_active_status()
        logger.info("Step 8: %d family flags updated", self.report.family_flags_updated)
        await self.create_guardian_authorities()
        logger.info("Step 9: %d authorities created", self.report.authorities_created)

        if self.report.unmatched:
            logger.warning(
                "%d legacy rows could not be matched to a member",
                len(self.report.unmatched),
            )
        return self.report


async def run_unified_member_migration(
    session: AsyncSession,
    *,
    normalize_names: bool = False,
    dry_run: bool = False,
    today: Optional[date] = None,
) -> MigrationReport:
    """
    Run every migration step in one transaction on ``session``.

    Commits on success. With ``dry_run`` every step runs and the
    transaction is rolled back. Any exception rolls back the whole run,
    is logged and re-raised.
    """
    migration = UnifiedMemberMigration(session, normalize_names=normalize_names, today=today)
    try:
        report = await migration.run()
        report.dry_run = dry_run
        if dry_run:
            await session.rollback()
            logger.info("Dry run complete, all changes rolled back")
        else:
            await session.commit()
            logger.info("Unified member migration committed")
        return report
    except Exception:
        await session.rollback()
        logger.exception("Unified member migration failed, all changes rolled back")
        raise
