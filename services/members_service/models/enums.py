"""Enum definitions for members service models."""

import enum


class MemberStatus(str, enum.Enum):
    """Lifecycle status of a unified member row."""

    ENROLLED = "enrolled"
    LEGACY = "legacy"
    ARCHIVED = "archived"
    PROSPECT = "prospect"


class AppUserRole(str, enum.Enum):
    """Roles carried by legacy app_user accounts."""

    OWNER_ADMIN = "OWNER_ADMIN"
    COACH = "COACH"
    PARENT_GUARDIAN = "PARENT_GUARDIAN"
    ATHLETE_VIEWER = "ATHLETE_VIEWER"
    ATHLETE = "ATHLETE"
