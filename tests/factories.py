"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    member = MemberFactory.create(email="custom@test.com")
    db_session.add(member)
    await db_session.commit()
"""

import uuid
from datetime import date, datetime, timedelta, timezone

TEST_PASSWORD = "Sup3r-secret!"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _unique_email() -> str:
    return f"{_unique('test')}@test.com"


def _password_hash(password: str = TEST_PASSWORD) -> str:
    from libs.auth.security import hash_password

    return hash_password(password)


# ---------------------------------------------------------------------------
# Admin Service
# ---------------------------------------------------------------------------


class AdminFactory:
    @staticmethod
    def create(**overrides):
        from services.admin_service.models import Admin

        password = overrides.pop("password", TEST_PASSWORD)
        defaults = {
            "first_name": "Test",
            "last_name": "Admin",
            "email": _unique_email(),
            "username": _unique("admin"),
            "password_hash": _password_hash(password),
            "is_master": False,
        }
        defaults.update(overrides)
        return Admin(**defaults)


# ---------------------------------------------------------------------------
# Members Service
# ---------------------------------------------------------------------------


class MemberFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import Member

        password = overrides.pop("password", None)
        defaults = {
            "first_name": "Test",
            "last_name": "Member",
            "email": _unique_email(),
            "status": "enrolled",
            "is_active": True,
            "family_is_active": True,
        }
        if password is not None:
            defaults["password_hash"] = _password_hash(password)
        defaults.update(overrides)
        return Member(**defaults)


class FamilyFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import Family

        defaults = {
            "family_name": "Test Family",
            "archived": False,
        }
        defaults.update(overrides)
        return Family(**defaults)


class AppUserFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import AppUser

        defaults = {
            "role": "PARENT_GUARDIAN",
            "email": _unique_email(),
            "full_name": "Test Parent",
            "is_active": True,
        }
        defaults.update(overrides)
        return AppUser(**defaults)


class AthleteFactory:
    """Pre-unification athlete row."""

    @staticmethod
    def create(**overrides):
        from services.members_service.models import Athlete

        defaults = {
            "first_name": "Test",
            "last_name": "Athlete",
            "date_of_birth": date.today() - timedelta(days=365 * 9),
            "status": "enrolled",
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Athlete(**defaults)


class LegacyMemberFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import LegacyMember

        defaults = {
            "first_name": "Legacy",
            "last_name": "Parent",
            "email": _unique_email(),
            "account_status": "active",
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return LegacyMember(**defaults)


# ---------------------------------------------------------------------------
# Academy Service
# ---------------------------------------------------------------------------


class CategoryFactory:
    @staticmethod
    def create(**overrides):
        from services.academy_service.models import ProgramCategory

        defaults = {
            "name": _unique("category"),
            "display_name": "Test Category",
            "archived": False,
        }
        defaults.update(overrides)
        return ProgramCategory(**defaults)


class ProgramFactory:
    @staticmethod
    def create(**overrides):
        from services.academy_service.models import Program

        defaults = {
            "name": _unique("program"),
            "display_name": "Test Program",
            "age_min": 5,
            "age_max": 12,
            "is_active": True,
            "archived": False,
        }
        defaults.update(overrides)
        return Program(**defaults)


class IterationFactory:
    @staticmethod
    def create(**overrides):
        from services.academy_service.models import ClassIteration

        defaults = {
            "iteration_number": 1,
            "days_of_week": ["monday", "wednesday"],
            "duration_type": "indefinite",
        }
        defaults.update(overrides)
        return ClassIteration(**defaults)


class EnrollmentFactory:
    @staticmethod
    def create(**overrides):
        from services.academy_service.models import MemberProgram

        defaults = {
            "days_per_week": 2,
            "selected_days": ["monday", "wednesday"],
        }
        defaults.update(overrides)
        return MemberProgram(**defaults)


# ---------------------------------------------------------------------------
# Events Service
# ---------------------------------------------------------------------------


class EventFactory:
    @staticmethod
    def create(**overrides):
        from services.events_service.models import Event

        start = date.today() + timedelta(days=14)
        defaults = {
            "event_name": "Summer Camp",
            "short_description": "A week of flips",
            "start_date": start,
            "end_date": start + timedelta(days=4),
            "type": "camp",
            "archived": False,
        }
        defaults.update(overrides)
        return Event(**defaults)


# ---------------------------------------------------------------------------
# Inquiries Service
# ---------------------------------------------------------------------------


class RegistrationFactory:
    @staticmethod
    def create(**overrides):
        from services.inquiries_service.models import Registration

        defaults = {
            "first_name": "Jamie",
            "last_name": "Rivera",
            "email": _unique_email(),
            "phone": "+15550100",
            "athlete_age": 8,
            "interests": "Ninja",
            "archived": False,
        }
        defaults.update(overrides)
        return Registration(**defaults)


# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def admin_headers_for(admin) -> dict:
    from libs.auth.models import ADMIN_ROLE
    from libs.auth.security import create_access_token

    token = create_access_token(
        admin.id,
        ADMIN_ROLE,
        email=admin.email,
        username=admin.username,
        is_master=admin.is_master,
    )
    return bearer(token)


def member_headers_for(member) -> dict:
    from libs.auth.models import MEMBER_ROLE
    from libs.auth.security import create_access_token

    token = create_access_token(
        member.id, MEMBER_ROLE, email=member.email, username=member.username
    )
    return bearer(token)
