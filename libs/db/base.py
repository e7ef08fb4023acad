"""Declarative bases for the Vortex Athletics schema.

``Base`` owns every live table and is what the bootstrap and Alembic
manage. ``LegacyBase`` describes the pre-unification identity tables that
the member migration reads and the cleanup drops; it is never passed to
``create_all``.
"""

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


class LegacyBase(DeclarativeBase):
    pass
