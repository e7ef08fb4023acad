from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, JSONType
from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column


class MemberProgram(Base):
    """Enrollment of a member in a program, optionally in one iteration."""

    __tablename__ = "member_program"
    __table_args__ = (
        UniqueConstraint(
            "member_id", "program_id", "iteration_id", name="uq_member_program"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    member_id: Mapped[int] = mapped_column(
        ForeignKey("member.id", ondelete="CASCADE"), nullable=False, index=True
    )
    program_id: Mapped[int] = mapped_column(
        ForeignKey("program.id", ondelete="CASCADE"), nullable=False, index=True
    )
    iteration_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("class_iteration.id", ondelete="SET NULL"), nullable=True
    )
    days_per_week: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    selected_days: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
