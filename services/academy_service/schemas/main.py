from datetime import date, datetime, time
from typing import Any, Optional

from libs.common.responses import ApiModel, blank_to_none
from pydantic import Field, field_validator, model_validator
from services.academy_service.models import DurationType

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def _normalize_days(value: Optional[list[str]]) -> Optional[list[str]]:
    if value is None:
        return None
    days = []
    for day in value:
        name = str(day).strip().lower()
        if name not in WEEKDAYS:
            raise ValueError(f"'{day}' is not a day of the week")
        if name not in days:
            days.append(name)
    return days


def iteration_window_errors(
    duration_type: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
    start_time: Optional[time],
    end_time: Optional[time],
) -> list[str]:
    """Problems with an iteration's dates and times; empty when valid."""
    errors = []
    if duration_type == DurationType.FINITE.value and end_date is None:
        errors.append("endDate: required for finite iterations")
    if start_date and end_date and end_date < start_date:
        errors.append("endDate: must not be before startDate")
    if start_time and end_time and start_time >= end_time:
        errors.append("startTime: must be before endTime")
    return errors


# --- Category Schemas ---


class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class CategoryUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    archived: Optional[bool] = None


class CategoryResponse(ApiModel):
    id: int
    name: str
    display_name: str
    description: Optional[str] = None
    archived: bool
    created_at: datetime
    updated_at: datetime


# --- Program Schemas ---


class ProgramBase(ApiModel):
    facility_id: Optional[int] = None
    category_id: Optional[int] = None
    skill_level: Optional[str] = Field(None, max_length=64)
    age_min: Optional[int] = Field(None, ge=0, le=99)
    age_max: Optional[int] = Field(None, ge=0, le=99)
    description: Optional[str] = None
    skill_requirements: Optional[str] = None

    @field_validator("skill_level", "description", "skill_requirements", mode="before")
    @classmethod
    def _blank_optional(cls, value):
        return blank_to_none(value)

    @model_validator(mode="after")
    def _check_age_range(self):
        if self.age_min is not None and self.age_max is not None:
            if self.age_min > self.age_max:
                raise ValueError("ageMin must not be greater than ageMax")
        return self


class ProgramCreate(ProgramBase):
    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True


class ProgramUpdate(ProgramBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_active: Optional[bool] = None
    archived: Optional[bool] = None


class ProgramResponse(ApiModel):
    id: int
    facility_id: Optional[int] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    category_display_name: Optional[str] = None
    name: str
    display_name: str
    skill_level: Optional[str] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    description: Optional[str] = None
    skill_requirements: Optional[str] = None
    is_active: bool
    archived: bool
    created_at: datetime
    updated_at: datetime


# --- Class Iteration Schemas ---


class IterationFields(ApiModel):
    days_of_week: Optional[list[str]] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    time_blocks: Optional[list[dict[str, Any]]] = None
    duration_type: Optional[DurationType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator(
        "start_time", "end_time", "start_date", "end_date", mode="before"
    )
    @classmethod
    def _blank_optional(cls, value):
        return blank_to_none(value)

    @field_validator("days_of_week")
    @classmethod
    def _check_days(cls, value):
        return _normalize_days(value)


class IterationCreate(IterationFields):
    days_of_week: list[str] = Field(default_factory=list)
    duration_type: DurationType = DurationType.INDEFINITE

    @model_validator(mode="after")
    def _check_window(self):
        errors = iteration_window_errors(
            self.duration_type.value,
            self.start_date,
            self.end_date,
            self.start_time,
            self.end_time,
        )
        if errors:
            raise ValueError("; ".join(errors))
        return self


class IterationUpdate(IterationFields):
    pass


class IterationResponse(ApiModel):
    id: int
    program_id: int
    iteration_number: int
    days_of_week: list[str] = Field(default_factory=list)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    time_blocks: Optional[list[dict[str, Any]]] = None
    duration_type: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


# --- Enrollment Schemas ---


class EnrollmentCreate(ApiModel):
    program_id: int
    iteration_id: Optional[int] = None
    days_per_week: Optional[int] = Field(None, ge=1, le=7)
    selected_days: Optional[list[str]] = None

    @field_validator("selected_days")
    @classmethod
    def _check_days(cls, value):
        return _normalize_days(value)


class EnrollmentResponse(ApiModel):
    id: int
    member_id: int
    program_id: int
    iteration_id: Optional[int] = None
    days_per_week: Optional[int] = None
    selected_days: Optional[list[str]] = None
    program_name: Optional[str] = None
    program_display_name: Optional[str] = None
    iteration_number: Optional[int] = None
    created_at: datetime
