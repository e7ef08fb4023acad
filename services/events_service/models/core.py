"""Events Service models for Vortex Athletics."""

from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, JSONType
from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column


class Event(Base):
    """Camps, special classes, watch parties and other dated events."""

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    long_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    type: Mapped[str] = mapped_column(
        String(32), default="event", server_default="event"
    )  # camp/class/event/watch-party
    # [{"date": "2025-06-01", "startTime": "09:00", "endTime": "12:00", "allDay": false}]
    dates_and_times: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)
    key_details: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    archived: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false")
    )

    # Audience tagging
    tag_type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    tag_class_ids: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)
    tag_category_ids: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)
    tag_all_parents: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false")
    )
    tag_boosters: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false")
    )
    tag_volunteers: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<Event {self.event_name}>"


class EventChangeLog(Base):
    """Audit trail of admin edits to an event."""

    __tablename__ = "event_change_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    admin_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    action: Mapped[str] = mapped_column(
        String(32), nullable=False
    )  # created/updated/archived/restored
    # {"field": {"oldValue": ..., "newValue": ...}}
    changes: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
