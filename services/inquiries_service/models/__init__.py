"""Inquiries Service models package."""

from services.inquiries_service.models.core import NewsletterSubscriber, Registration

__all__ = [
    "NewsletterSubscriber",
    "Registration",
]
