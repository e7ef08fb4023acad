"""Events Service models package."""

from services.events_service.models.core import Event, EventChangeLog

__all__ = [
    "Event",
    "EventChangeLog",
]
