"""Public inquiry endpoints used by the marketing site forms."""

from fastapi import APIRouter, Depends, HTTPException, status
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.inquiries_service.models import NewsletterSubscriber, Registration
from services.inquiries_service.schemas import (
    NewsletterCreate,
    RegistrationCreate,
    RegistrationCreated,
)
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api", tags=["inquiries"])
logger = get_logger(__name__)


@router.post("/registrations", response_model=ApiResponse[RegistrationCreated])
async def submit_registration(
    registration_in: RegistrationCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Submit a trial-class inquiry. One registration per email address."""
    existing = await db.execute(
        select(Registration.id).where(
            func.lower(Registration.email) == registration_in.email.lower()
        )
    )
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email already registered"
        )

    registration = Registration(**registration_in.model_dump())
    db.add(registration)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent submission for the same email
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email already registered"
        )
    await db.refresh(registration)

    logger.info(
        "Registration submitted",
        extra={"extra_fields": {"registration_id": registration.id}},
    )
    return ok(
        RegistrationCreated(id=registration.id),
        "Registration submitted successfully",
    )


@router.post("/newsletter", response_model=ApiResponse[None])
async def subscribe_newsletter(
    subscriber_in: NewsletterCreate,
    db: AsyncSession = Depends(get_async_db),
):
    existing = await db.execute(
        select(NewsletterSubscriber.id).where(
            func.lower(NewsletterSubscriber.email) == subscriber_in.email.lower()
        )
    )
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email already subscribed"
        )

    db.add(NewsletterSubscriber(email=subscriber_in.email))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email already subscribed"
        )
    return ok(message="Successfully subscribed to newsletter")
