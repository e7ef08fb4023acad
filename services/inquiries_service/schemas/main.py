from datetime import datetime
from typing import Optional

from libs.common.responses import ApiModel, blank_to_none
from pydantic import EmailStr, Field, field_validator

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"


class RegistrationBase(ApiModel):
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    athlete_age: Optional[int] = Field(None, ge=5, le=18)
    interests: Optional[str] = Field(None, max_length=500)
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator("phone", "athlete_age", "interests", "message", mode="before")
    @classmethod
    def _blank_optional(cls, value):
        return blank_to_none(value)


class RegistrationCreate(RegistrationBase):
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr


class RegistrationUpdate(RegistrationBase):
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    archived: Optional[bool] = None


class RegistrationResponse(ApiModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    athlete_age: Optional[int] = None
    interests: Optional[str] = None
    message: Optional[str] = None
    archived: bool = False
    created_at: datetime
    updated_at: datetime


class RegistrationCreated(ApiModel):
    id: int


class NewsletterCreate(ApiModel):
    email: EmailStr


class NewsletterResponse(ApiModel):
    id: int
    email: str
    created_at: datetime
