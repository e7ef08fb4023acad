"""Sample events for fresh installs and demo databases."""

from datetime import date, timedelta
from typing import Optional

from libs.common.logging import get_logger
from services.events_service.models import Event
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

# (days from today, length in days, fields)
SAMPLE_EVENTS = (
    (
        14,
        4,
        {
            "event_name": "Summer Tumbling Camp",
            "type": "camp",
            "short_description": "Four mornings of tumbling, trampoline and games.",
            "key_details": ["Ages 5-12", "9:00 AM - 12:00 PM", "Bring water and a snack"],
            "tag_type": "all",
        },
    ),
    (
        21,
        0,
        {
            "event_name": "Ninja Open Gym",
            "type": "class",
            "short_description": "Drop-in obstacle course night for current ninjas.",
            "key_details": ["Members only", "6:00 PM - 8:00 PM"],
            "tag_type": "classes",
        },
    ),
    (
        35,
        0,
        {
            "event_name": "Championship Watch Party",
            "type": "watch-party",
            "short_description": "Cheer on the pros with the whole gym family.",
            "key_details": ["Free for families", "Snacks provided"],
            "tag_all_parents": True,
        },
    ),
    (
        60,
        0,
        {
            "event_name": "Fall Showcase",
            "type": "event",
            "short_description": "Athletes show off a season of new skills.",
            "key_details": ["All programs", "Doors open 30 minutes early"],
            "tag_type": "all",
            "tag_boosters": True,
            "tag_volunteers": True,
        },
    ),
)


async def seed_sample_events(
    session: AsyncSession, today: Optional[date] = None, force: bool = False
) -> int:
    """
    Insert the sample events when the table is empty (or ``force``).

    Returns the number of events created. Commits.
    """
    existing = await session.scalar(select(func.count(Event.id))) or 0
    if existing and not force:
        logger.info("Found %d existing events; skipping seed", existing)
        return 0

    today = today or date.today()
    for offset, length, fields in SAMPLE_EVENTS:
        start = today + timedelta(days=offset)
        session.add(
            Event(
                start_date=start,
                end_date=start + timedelta(days=length) if length else None,
                **fields,
            )
        )
    await session.commit()
    logger.info("Seeded %d sample events", len(SAMPLE_EVENTS))
    return len(SAMPLE_EVENTS)
