"""Members Service schemas package."""

from services.members_service.schemas.family import (
    FamilyCreate,
    FamilyDetailResponse,
    FamilyResponse,
    FamilyUpdate,
    GuardianIn,
    GuardianResponse,
)
from services.members_service.schemas.member import (
    MemberCreate,
    MemberLoginRequest,
    MemberResponse,
    MemberTokenResponse,
    MemberUpdate,
)

__all__ = [
    "FamilyCreate",
    "FamilyDetailResponse",
    "FamilyResponse",
    "FamilyUpdate",
    "GuardianIn",
    "GuardianResponse",
    "MemberCreate",
    "MemberLoginRequest",
    "MemberResponse",
    "MemberTokenResponse",
    "MemberUpdate",
]
