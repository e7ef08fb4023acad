"""Admin events router. Every change is written to the event change log."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.admin_service.dependencies import get_current_admin
from services.admin_service.models import Admin
from services.events_service.models import Event, EventChangeLog
from services.events_service.schemas import (
    EventArchive,
    EventChangeLogResponse,
    EventCreate,
    EventResponse,
    EventUpdate,
)
from services.events_service.services.change_log import (
    diff_snapshots,
    record_change,
    snapshot,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/admin/events", tags=["admin-events"])
logger = get_logger(__name__)

REQUIRED_FIELDS = {
    "event_name",
    "start_date",
    "type",
    "tag_all_parents",
    "tag_boosters",
    "tag_volunteers",
}

CurrentAdmin = Annotated[Admin, Depends(get_current_admin)]


async def _get_event_or_404(db: AsyncSession, event_id: int) -> Event:
    event = await db.get(Event, event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


async def _set_archived(
    db: AsyncSession, event: Event, admin: Admin, archived: bool
) -> Event:
    if event.archived != archived:
        before = snapshot(event, ["archived"])
        event.archived = archived
        record_change(
            db,
            event,
            admin.id,
            "archived" if archived else "restored",
            diff_snapshots(before, snapshot(event, ["archived"])),
        )
    await db.commit()
    await db.refresh(event)
    return event


@router.get("", response_model=ApiResponse[List[EventResponse]])
async def list_events(
    admin: CurrentAdmin,
    archived: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_async_db),
):
    query = select(Event).order_by(Event.start_date, Event.id)
    if archived is not None:
        query = query.where(Event.archived.is_(archived))
    result = await db.execute(query)
    return ok([EventResponse.model_validate(e) for e in result.scalars().all()])


@router.post(
    "",
    response_model=ApiResponse[EventResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    event_in: EventCreate,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_async_db),
):
    event = Event(**event_in.model_dump())
    db.add(event)
    await db.flush()
    record_change(db, event, admin.id, "created")
    await db.commit()
    await db.refresh(event)

    logger.info("Event %s created by admin %s", event.id, admin.id)
    return ok(EventResponse.model_validate(event), "Event created successfully")


@router.put("/{event_id}", response_model=ApiResponse[EventResponse])
async def update_event(
    event_id: int,
    event_in: EventUpdate,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_async_db),
):
    event = await _get_event_or_404(db, event_id)
    before = snapshot(event)

    for field, value in event_in.model_dump(exclude_unset=True).items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(event, field, value)
    if event.end_date is not None and event.end_date < event.start_date:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="endDate must not be before startDate",
        )

    changes = diff_snapshots(before, snapshot(event))
    if changes:
        record_change(db, event, admin.id, "updated", changes)
    await db.commit()
    await db.refresh(event)
    return ok(EventResponse.model_validate(event), "Event updated successfully")


@router.patch("/{event_id}/archive", response_model=ApiResponse[EventResponse])
async def archive_event(
    event_id: int,
    admin: CurrentAdmin,
    archive_in: Optional[EventArchive] = Body(None),
    db: AsyncSession = Depends(get_async_db),
):
    """Archive an event, or restore it with ``{"archived": false}``."""
    archived = archive_in.archived if archive_in is not None else True
    event = await _get_event_or_404(db, event_id)
    event = await _set_archived(db, event, admin, archived)
    message = "Event archived successfully" if archived else "Event restored successfully"
    return ok(EventResponse.model_validate(event), message)


@router.delete("/{event_id}", response_model=ApiResponse[EventResponse])
async def delete_event(
    event_id: int,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_async_db),
):
    """Events are never removed; deleting archives them."""
    event = await _get_event_or_404(db, event_id)
    event = await _set_archived(db, event, admin, True)
    return ok(EventResponse.model_validate(event), "Event deleted successfully")


@router.get("/{event_id}/log", response_model=ApiResponse[List[EventChangeLogResponse]])
async def get_event_log(
    event_id: int,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_async_db),
):
    await _get_event_or_404(db, event_id)
    rows = (
        await db.execute(
            select(EventChangeLog, Admin.username)
            .outerjoin(Admin, Admin.id == EventChangeLog.admin_id)
            .where(EventChangeLog.event_id == event_id)
            .order_by(EventChangeLog.created_at.desc(), EventChangeLog.id.desc())
        )
    ).all()

    entries = []
    for entry, username in rows:
        response = EventChangeLogResponse.model_validate(entry)
        response.admin_username = username
        entries.append(response)
    return ok(entries)
