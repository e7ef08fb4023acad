"""Members Service models package.

Re-exports all models and enums so that:
  - ``from services.members_service.models import Member`` works
  - Alembic env.py and the bootstrap see every table on import

Model definitions are split across:
  - models/core.py   - unified member, family and account tables
  - models/legacy.py - pre-unification tables read by the migration
"""

from services.members_service.models.core import (  # noqa: F401
    AppUser,
    EmergencyContact,
    Facility,
    Family,
    FamilyGuardian,
    Member,
    ParentGuardianAuthority,
    UserRole,
)
from services.members_service.models.enums import (  # noqa: F401
    AppUserRole,
    MemberStatus,
)
from services.members_service.models.legacy import (  # noqa: F401
    LEGACY_MEMBER_TABLES,
    Athlete,
    AthleteProgram,
    LegacyMember,
    MemberChild,
)

__all__ = [
    "AppUser",
    "AppUserRole",
    "Athlete",
    "AthleteProgram",
    "EmergencyContact",
    "Facility",
    "Family",
    "FamilyGuardian",
    "LEGACY_MEMBER_TABLES",
    "LegacyMember",
    "Member",
    "MemberChild",
    "MemberStatus",
    "ParentGuardianAuthority",
    "UserRole",
]
