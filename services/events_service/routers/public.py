"""Public events listing."""

from typing import List

from fastapi import APIRouter, Depends
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.events_service.models import Event
from services.events_service.schemas import EventResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api", tags=["events"])


@router.get("/events", response_model=ApiResponse[List[EventResponse]])
async def list_public_events(db: AsyncSession = Depends(get_async_db)):
    result = await db.execute(
        select(Event)
        .where(Event.archived.is_(False))
        .order_by(Event.start_date, Event.id)
    )
    return ok([EventResponse.model_validate(e) for e in result.scalars().all()])
