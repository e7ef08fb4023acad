"""Pydantic schemas for unified members."""

from datetime import date, datetime
from typing import Literal, Optional

from libs.auth.security import check_password_length
from libs.common.datetime_utils import calculate_age
from libs.common.responses import ApiModel, blank_to_none
from pydantic import EmailStr, Field, computed_field, field_validator

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"

MemberStatusValue = Literal["enrolled", "legacy", "archived", "prospect"]


class MemberFields(ApiModel):
    """Optional fields shared by create and update payloads."""

    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(None, max_length=500)
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    password: Optional[str] = Field(None, min_length=8)
    date_of_birth: Optional[date] = None
    family_id: Optional[int] = None
    facility_id: Optional[int] = None
    medical_notes: Optional[str] = None
    internal_flags: Optional[str] = None

    @field_validator(
        "email",
        "phone",
        "address",
        "username",
        "password",
        "date_of_birth",
        "medical_notes",
        "internal_flags",
        mode="before",
    )
    @classmethod
    def _blank_optional(cls, value):
        return blank_to_none(value)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value):
        return check_password_length(value)


class MemberCreate(MemberFields):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    status: MemberStatusValue = "enrolled"
    is_active: bool = True


class MemberUpdate(MemberFields):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[MemberStatusValue] = None
    is_active: Optional[bool] = None


class MemberResponse(ApiModel):
    id: int
    facility_id: Optional[int] = None
    family_id: Optional[int] = None
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    username: Optional[str] = None
    date_of_birth: Optional[date] = None
    status: str
    is_active: bool
    family_is_active: bool
    medical_notes: Optional[str] = None
    internal_flags: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    has_login: bool = False

    @computed_field
    @property
    def age(self) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return calculate_age(self.date_of_birth)


class MemberLoginRequest(ApiModel):
    """``username`` accepts either the username or the email address."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MemberTokenResponse(ApiModel):
    token: str
    token_type: str = "bearer"
    member: MemberResponse
