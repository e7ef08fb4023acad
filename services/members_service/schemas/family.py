"""Pydantic schemas for families and guardians."""

from datetime import datetime
from typing import Optional

from libs.common.responses import ApiModel
from pydantic import Field

from services.members_service.schemas.member import MemberResponse


class GuardianIn(ApiModel):
    member_id: int
    is_primary: bool = False


class FamilyCreate(ApiModel):
    family_name: str = Field(..., min_length=1, max_length=255)
    facility_id: Optional[int] = None
    primary_member_id: Optional[int] = None
    member_ids: list[int] = Field(default_factory=list)
    guardians: list[GuardianIn] = Field(default_factory=list)


class FamilyUpdate(ApiModel):
    family_name: Optional[str] = Field(None, min_length=1, max_length=255)
    primary_member_id: Optional[int] = None
    archived: Optional[bool] = None
    add_member_ids: list[int] = Field(default_factory=list)


class GuardianResponse(ApiModel):
    id: int
    member_id: Optional[int] = None
    is_primary: bool
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class FamilyResponse(ApiModel):
    id: int
    facility_id: Optional[int] = None
    family_name: Optional[str] = None
    primary_member_id: Optional[int] = None
    archived: bool
    member_count: int = 0
    created_at: datetime
    updated_at: datetime


class FamilyDetailResponse(FamilyResponse):
    members: list[MemberResponse] = Field(default_factory=list)
    guardians: list[GuardianResponse] = Field(default_factory=list)
