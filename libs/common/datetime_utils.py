"""Datetime utilities for timezone-aware UTC timestamps and ages.

Usage:
    from libs.common.datetime_utils import utc_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import date, datetime, timezone
from typing import Optional

ADULT_AGE = 18


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    Always use this for timestamps in the database.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def latest(*values: Optional[datetime]) -> Optional[datetime]:
    """Return the most recent of the given timestamps, ignoring None."""
    present = [as_utc(v) for v in values if v is not None]
    return max(present) if present else None


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """Whole years elapsed since date_of_birth."""
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def is_minor(date_of_birth: Optional[date], today: Optional[date] = None) -> bool:
    """True when the date of birth is known and the person is under 18."""
    if date_of_birth is None:
        return False
    return calculate_age(date_of_birth, today) < ADULT_AGE
