"""Pre-unification identity tables.

Mapped on ``LegacyBase`` so the bootstrap never recreates them. Foreign
keys are left as plain integers: these tables are read by the migration
and dropped by the cleanup, never written by the API.
"""

from datetime import date, datetime
from typing import Optional

from libs.db.base import JSONType, LegacyBase
from sqlalchemy import Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column


class LegacyMember(LegacyBase):
    """Self-registered member accounts from the first site version."""

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    password_hash: Mapped[Optional[str]] = mapped_column(String(255))
    account_status: Mapped[Optional[str]] = mapped_column(String(32))
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class MemberChild(LegacyBase):
    __tablename__ = "member_children"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    member_id: Mapped[Optional[int]] = mapped_column(Integer)
    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date)


class Athlete(LegacyBase):
    """Child or adult athlete, optionally linked to an app_user login."""

    __tablename__ = "athlete"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    facility_id: Mapped[Optional[int]] = mapped_column(Integer)
    family_id: Mapped[Optional[int]] = mapped_column(Integer)
    user_id: Mapped[Optional[int]] = mapped_column(Integer)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date)
    status: Mapped[Optional[str]] = mapped_column(String(32))
    medical_notes: Mapped[Optional[str]] = mapped_column(Text)
    internal_flags: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class AthleteProgram(LegacyBase):
    __tablename__ = "athlete_program"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    athlete_id: Mapped[int] = mapped_column(Integer, nullable=False)
    program_id: Mapped[int] = mapped_column(Integer, nullable=False)
    iteration_id: Mapped[Optional[int]] = mapped_column(Integer)
    days_per_week: Mapped[Optional[int]] = mapped_column(Integer)
    selected_days: Mapped[Optional[list]] = mapped_column(JSONType)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


LEGACY_MEMBER_TABLES = ("members", "member_children", "athlete")
