"""Idempotent schema bootstrap.

Creates missing tables, adds columns that exist on the models but not in
the live database, and seeds the default facility. Safe to run on every
startup; Alembic remains the tool for destructive or data-changing schema
work.
"""

import importlib
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import Column, Table, func, insert, inspect, select, text
from sqlalchemy.engine import Connection, Dialect
from sqlalchemy.ext.asyncio import AsyncEngine

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.base import Base

logger = get_logger(__name__)

MODEL_MODULES = (
    "services.members_service.models",
    "services.academy_service.models",
    "services.events_service.models",
    "services.inquiries_service.models",
    "services.admin_service.models",
)


def load_models() -> None:
    """Import every model module so Base.metadata knows all tables."""
    for module in MODEL_MODULES:
        importlib.import_module(module)


@dataclass
class BootstrapReport:
    created_tables: list[str] = field(default_factory=list)
    added_columns: list[str] = field(default_factory=list)
    seeded_facility: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.created_tables or self.added_columns or self.seeded_facility)


def _server_default_sql(column: Column, dialect: Dialect) -> Optional[str]:
    default = column.server_default
    if default is None:
        return None
    arg = getattr(default, "arg", None)
    if arg is None:
        return None
    if isinstance(arg, str):
        return "'" + arg.replace("'", "''") + "'"
    return str(arg.compile(dialect=dialect))


def _add_column_sql(table: Table, column: Column, dialect: Dialect) -> str:
    quote = dialect.identifier_preparer.quote
    column_type = column.type.compile(dialect=dialect)
    ddl = f"ALTER TABLE {quote(table.name)} ADD COLUMN {quote(column.name)} {column_type}"
    default_sql = _server_default_sql(column, dialect)
    if default_sql is not None:
        ddl += f" DEFAULT {default_sql}"
        # NOT NULL is only safe on populated tables when a default fills the gap
        if not column.nullable:
            ddl += " NOT NULL"
    return ddl


def _create_missing_tables(sync_conn: Connection) -> list[str]:
    existing = set(inspect(sync_conn).get_table_names())
    missing = [t for t in Base.metadata.sorted_tables if t.name not in existing]
    if missing:
        Base.metadata.create_all(sync_conn, tables=missing, checkfirst=True)
    return [t.name for t in missing]


def _add_missing_columns(sync_conn: Connection) -> list[str]:
    inspector = inspect(sync_conn)
    added = []
    for table in Base.metadata.sorted_tables:
        if not inspector.has_table(table.name):
            continue
        live = {col["name"] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in live or column.primary_key:
                continue
            sync_conn.execute(text(_add_column_sql(table, column, sync_conn.dialect)))
            added.append(f"{table.name}.{column.name}")
    return added


async def init_database(
    engine: AsyncEngine, facility_name: Optional[str] = None
) -> BootstrapReport:
    """
    Bring the live schema up to the models and seed the default facility.

    Running it twice reports no created tables and no added columns the
    second time.
    """
    load_models()
    facility_name = facility_name or get_settings().DEFAULT_FACILITY_NAME
    report = BootstrapReport()

    async with engine.begin() as conn:
        report.added_columns = await conn.run_sync(_add_missing_columns)
        report.created_tables = await conn.run_sync(_create_missing_tables)

        facility = Base.metadata.tables["facility"]
        count = await conn.scalar(select(func.count()).select_from(facility))
        if not count:
            now = utc_now()
            await conn.execute(
                insert(facility).values(
                    name=facility_name,
                    timezone=get_settings().TIMEZONE,
                    created_at=now,
                    updated_at=now,
                )
            )
            report.seeded_facility = True

    for name in report.created_tables:
        logger.info("Created table %s", name)
    for name in report.added_columns:
        logger.info("Added column %s", name)
    if report.seeded_facility:
        logger.info("Seeded default facility %r", facility_name)
    if not report.changed:
        logger.info("Database schema already up to date")
    return report
