"""Event change tracking."""

from typing import Any, Iterable, Optional

from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python
from services.events_service.models import Event, EventChangeLog
from sqlalchemy.ext.asyncio import AsyncSession

TRACKED_FIELDS = (
    "event_name",
    "short_description",
    "long_description",
    "start_date",
    "end_date",
    "type",
    "dates_and_times",
    "key_details",
    "address",
    "archived",
    "tag_type",
    "tag_class_ids",
    "tag_category_ids",
    "tag_all_parents",
    "tag_boosters",
    "tag_volunteers",
)


def snapshot(event: Event, fields: Iterable[str] = TRACKED_FIELDS) -> dict[str, Any]:
    """JSON-ready copy of an event's tracked fields."""
    return {name: to_jsonable_python(getattr(event, name)) for name in fields}


def diff_snapshots(before: dict[str, Any], after: dict[str, Any]) -> dict[str, Any]:
    """
    Changed fields as ``{"fieldName": {"oldValue": ..., "newValue": ...}}``.

    Keys are camelCase to match the API payloads.
    """
    changes = {}
    for name, new_value in after.items():
        old_value = before.get(name)
        if old_value != new_value:
            changes[to_camel(name)] = {"oldValue": old_value, "newValue": new_value}
    return changes


def record_change(
    session: AsyncSession,
    event: Event,
    admin_id: Optional[int],
    action: str,
    changes: Optional[dict[str, Any]] = None,
) -> EventChangeLog:
    """Add a change-log row to the session. The caller commits."""
    entry = EventChangeLog(
        event_id=event.id, admin_id=admin_id, action=action, changes=changes or None
    )
    session.add(entry)
    return entry
