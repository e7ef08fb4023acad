"""
Drop the legacy identity tables once their rows live in ``member``.

Without ``confirm`` only the pre-flight checks run. Tables are dropped
only when every check passes.
"""

from dataclasses import dataclass, field
from typing import Optional

from libs.common.logging import get_logger
from libs.db.introspection import dialect_name, table_exists
from services.members_service.models import LEGACY_MEMBER_TABLES, LegacyMember, Member
from sqlalchemy import func, select, table, text
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass
class TableCheck:
    name: str
    exists: bool
    row_count: int = 0
    safe: bool = True
    reason: Optional[str] = None


@dataclass
class CleanupReport:
    member_table_exists: bool = False
    member_count: int = 0
    checks: list[TableCheck] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)
    confirmed: bool = False

    @property
    def safe_to_drop(self) -> bool:
        return self.member_table_exists and all(check.safe for check in self.checks)


async def _count(session: AsyncSession, name: str) -> int:
    return await session.scalar(select(func.count()).select_from(table(name))) or 0


async def _check_table(session: AsyncSession, name: str, member_count: int) -> TableCheck:
    if not await table_exists(session, name):
        return TableCheck(name=name, exists=False)

    count = await _count(session, name)
    check = TableCheck(name=name, exists=True, row_count=count)
    if count == 0:
        return check

    if name == "athlete":
        if member_count < count:
            check.safe = False
            check.reason = f"{count} athletes but only {member_count} members"
    elif name == LegacyMember.__tablename__:
        member_emails = {
            email.lower() for email in await session.scalars(select(Member.email)) if email
        }
        legacy_emails = await session.scalars(select(LegacyMember.email))
        missing = [e for e in legacy_emails if (e or "").lower() not in member_emails]
        if missing:
            check.safe = False
            check.reason = f"{len(missing)} legacy members have no unified member"
    else:
        check.safe = False
        check.reason = f"{count} rows still present"
    return check


async def cleanup_legacy_tables(session: AsyncSession, *, confirm: bool = False) -> CleanupReport:
    report = CleanupReport(confirmed=confirm)
    report.member_table_exists = await table_exists(session, Member.__tablename__)
    if not report.member_table_exists:
        logger.error("Unified member table does not exist; run the migration first")
        return report

    report.member_count = await _count(session, Member.__tablename__)
    for name in LEGACY_MEMBER_TABLES:
        check = await _check_table(session, name, report.member_count)
        report.checks.append(check)
        if not check.exists:
            logger.info("%s: not present", name)
        elif check.safe:
            logger.info("%s: %d rows, safe to drop", name, check.row_count)
        else:
            logger.warning("%s: not safe to drop (%s)", name, check.reason)

    if not report.safe_to_drop:
        logger.warning("Legacy tables hold unmigrated rows; nothing dropped")
        return report
    if not confirm:
        logger.info("Checks passed. Re-run with confirmation to drop the tables")
        return report

    cascade = " CASCADE" if await dialect_name(session) == "postgresql" else ""
    try:
        for check in report.checks:
            if not check.exists:
                continue
            await session.execute(text(f'DROP TABLE IF EXISTS "{check.name}"{cascade}'))
            report.dropped.append(check.name)
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Dropping legacy tables failed, rolled back")
        raise

    logger.info("Dropped legacy tables: %s", ", ".join(report.dropped) or "none")
    return report
