from datetime import datetime
from typing import Optional

from libs.auth.security import check_password_length
from libs.common.responses import ApiModel, blank_to_none
from pydantic import EmailStr, Field, field_validator

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"


class LoginRequest(ApiModel):
    """``username`` accepts either the username or the email address."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminCreate(ApiModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8)
    is_master: bool = False

    @field_validator("phone", mode="before")
    @classmethod
    def _blank_phone(cls, value):
        return blank_to_none(value)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value):
        return check_password_length(value)


class AdminUpdate(ApiModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    password: Optional[str] = Field(None, min_length=8)
    is_master: Optional[bool] = None

    @field_validator("phone", "password", mode="before")
    @classmethod
    def _blank_optional(cls, value):
        return blank_to_none(value)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value):
        return check_password_length(value)


class AdminResponse(ApiModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    username: str
    is_master: bool = False
    created_at: datetime
    updated_at: datetime


class TokenResponse(ApiModel):
    token: str
    token_type: str = "bearer"
    admin: Optional[AdminResponse] = None
