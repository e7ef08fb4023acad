"""Inquiry management for the admin dashboard."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.admin_service.dependencies import get_current_admin
from services.inquiries_service.models import NewsletterSubscriber, Registration
from services.inquiries_service.schemas import (
    NewsletterResponse,
    RegistrationResponse,
    RegistrationUpdate,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(
    prefix="/api/admin",
    tags=["admin-inquiries"],
    dependencies=[Depends(get_current_admin)],
)
logger = get_logger(__name__)

REQUIRED_FIELDS = {"first_name", "last_name", "email", "archived"}


async def _get_registration_or_404(db: AsyncSession, registration_id: int) -> Registration:
    registration = await db.get(Registration, registration_id)
    if registration is None:
        raise HTTPException(status_code=404, detail="Registration not found")
    return registration


@router.get("/registrations", response_model=ApiResponse[List[RegistrationResponse]])
async def list_registrations(
    include_archived: bool = Query(False, alias="includeArchived"),
    db: AsyncSession = Depends(get_async_db),
):
    """List registrations, newest first. Archived rows are hidden by default."""
    query = select(Registration)
    if not include_archived:
        query = query.where(Registration.archived.is_(False))
    query = query.order_by(Registration.created_at.desc(), Registration.id.desc())

    result = await db.execute(query)
    return ok([RegistrationResponse.model_validate(r) for r in result.scalars().all()])


@router.put("/registrations/{registration_id}", response_model=ApiResponse[RegistrationResponse])
async def update_registration(
    registration_id: int,
    registration_in: RegistrationUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    registration = await _get_registration_or_404(db, registration_id)
    updates = registration_in.model_dump(exclude_unset=True)

    new_email = updates.get("email")
    if new_email and new_email.lower() != registration.email.lower():
        clash = await db.execute(
            select(Registration.id).where(
                func.lower(Registration.email) == new_email.lower(),
                Registration.id != registration.id,
            )
        )
        if clash.first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
            )

    for field, value in updates.items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(registration, field, value)

    await db.commit()
    await db.refresh(registration)
    return ok(RegistrationResponse.model_validate(registration), "Registration updated successfully")


@router.delete("/registrations/{registration_id}", response_model=ApiResponse[RegistrationResponse])
async def archive_registration(
    registration_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Soft delete: the row stays, flagged as archived."""
    registration = await _get_registration_or_404(db, registration_id)
    registration.archived = True
    await db.commit()
    await db.refresh(registration)

    logger.info("Registration %s archived", registration_id)
    return ok(RegistrationResponse.model_validate(registration), "Registration archived successfully")


@router.get("/newsletter", response_model=ApiResponse[List[NewsletterResponse]])
async def list_newsletter_subscribers(db: AsyncSession = Depends(get_async_db)):
    result = await db.execute(
        select(NewsletterSubscriber).order_by(
            NewsletterSubscriber.created_at.desc(), NewsletterSubscriber.id.desc()
        )
    )
    return ok([NewsletterResponse.model_validate(s) for s in result.scalars().all()])
