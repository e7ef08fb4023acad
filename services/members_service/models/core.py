"""Unified member models.

``member`` is the single identity table for guardians, athletes and
prospects. ``app_user`` is kept for account lookups; the columns named
``user_id`` / ``primary_user_id`` / ``athlete_id`` are the legacy keys the
unified-member migration rewrites into ``member_id`` counterparts.
"""

from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column


class Facility(Base):
    """Single-tenant organizational root."""

    __tablename__ = "facility"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    timezone: Mapped[str] = mapped_column(
        String(64), default="America/New_York", server_default="America/New_York"
    )
    logo_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<Facility {self.name}>"


class AppUser(Base):
    """Pre-unification login account (owners, coaches, guardians)."""

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    facility_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("facility.id", ondelete="SET NULL"), nullable=True
    )
    role: Mapped[str] = mapped_column(
        String(32), nullable=False, default="PARENT_GUARDIAN"
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    username: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<AppUser {self.email}>"


class Family(Base):
    __tablename__ = "family"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    facility_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("facility.id", ondelete="SET NULL"), nullable=True
    )
    family_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    primary_user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    primary_member_id: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, index=True
    )
    archived: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<Family {self.family_name}>"


class Member(Base):
    """Unified identity: guardian, athlete or prospect.

    ``family_is_active`` is derived: true when any member of the same
    family is active and not archived.
    """

    __tablename__ = "member"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    facility_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("facility.id", ondelete="SET NULL"), nullable=True
    )
    family_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("family.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Identity
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, index=True
    )
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    username: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, index=True
    )
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Status
    status: Mapped[str] = mapped_column(
        String(32), default="enrolled", server_default="enrolled"
    )  # enrolled/legacy/archived/prospect
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true")
    )
    family_is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true")
    )

    medical_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    internal_flags: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_login(self) -> bool:
        return bool(self.password_hash)

    def __repr__(self):
        return f"<Member {self.id} {self.first_name} {self.last_name}>"


class FamilyGuardian(Base):
    __tablename__ = "family_guardian"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    family_id: Mapped[int] = mapped_column(
        ForeignKey("family.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    member_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("member.id", ondelete="CASCADE"), nullable=True, index=True
    )
    is_primary: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )


class ParentGuardianAuthority(Base):
    """Legal authority of a guardian member over a minor member."""

    __tablename__ = "parent_guardian_authority"
    __table_args__ = (
        UniqueConstraint(
            "parent_member_id", "child_member_id", name="uq_parent_child_authority"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    parent_member_id: Mapped[int] = mapped_column(
        ForeignKey("member.id", ondelete="CASCADE"), nullable=False
    )
    child_member_id: Mapped[int] = mapped_column(
        ForeignKey("member.id", ondelete="CASCADE"), nullable=False
    )
    has_legal_authority: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true")
    )
    relationship: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )


class EmergencyContact(Base):
    __tablename__ = "emergency_contact"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    athlete_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    member_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("member.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    relationship: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )


class UserRole(Base):
    __tablename__ = "user_role"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    member_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("member.id", ondelete="CASCADE"), nullable=True, index=True
    )
    role: Mapped[str] = mapped_column(String(32), nullable=False)
