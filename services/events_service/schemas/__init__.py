"""Events Service schemas package."""

from services.events_service.schemas.main import (
    EventArchive,
    EventChangeLogResponse,
    EventCreate,
    EventResponse,
    EventUpdate,
)

__all__ = [
    "EventArchive",
    "EventChangeLogResponse",
    "EventCreate",
    "EventResponse",
    "EventUpdate",
]
