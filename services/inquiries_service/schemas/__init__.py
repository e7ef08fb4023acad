"""Inquiries Service schemas package."""

from services.inquiries_service.schemas.main import (
    NewsletterCreate,
    NewsletterResponse,
    RegistrationCreate,
    RegistrationCreated,
    RegistrationResponse,
    RegistrationUpdate,
)

__all__ = [
    "NewsletterCreate",
    "NewsletterResponse",
    "RegistrationCreate",
    "RegistrationCreated",
    "RegistrationResponse",
    "RegistrationUpdate",
]
