"""Pydantic schemas for Events Service."""

from datetime import date, datetime
from typing import Any, Literal, Optional

from libs.common.responses import ApiModel, blank_to_none
from pydantic import Field, field_validator, model_validator

EventType = Literal["camp", "class", "event", "watch-party"]
TagType = Literal["all", "classes", "categories", "parents", "boosters", "volunteers"]


class EventFields(ApiModel):
    """Optional event fields shared by create and update."""

    short_description: Optional[str] = None
    long_description: Optional[str] = None
    end_date: Optional[date] = None
    # Each entry: {"date", "startTime", "endTime", "allDay"}
    dates_and_times: Optional[list[dict[str, Any]]] = None
    key_details: Optional[list[str]] = None
    address: Optional[str] = None
    tag_type: Optional[TagType] = None
    tag_class_ids: Optional[list[int]] = None
    tag_category_ids: Optional[list[int]] = None

    @field_validator(
        "short_description",
        "long_description",
        "end_date",
        "address",
        "tag_type",
        mode="before",
    )
    @classmethod
    def _blank_optional(cls, value):
        return blank_to_none(value)


class EventCreate(EventFields):
    event_name: str = Field(..., min_length=1, max_length=255)
    start_date: date
    type: EventType = "event"
    tag_all_parents: bool = False
    tag_boosters: bool = False
    tag_volunteers: bool = False

    @model_validator(mode="after")
    def _check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class EventUpdate(EventFields):
    event_name: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[date] = None
    type: Optional[EventType] = None
    tag_all_parents: Optional[bool] = None
    tag_boosters: Optional[bool] = None
    tag_volunteers: Optional[bool] = None


class EventArchive(ApiModel):
    archived: bool = True


class EventResponse(ApiModel):
    id: int
    event_name: str
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    type: str
    dates_and_times: Optional[list[dict[str, Any]]] = None
    key_details: Optional[list[str]] = None
    address: Optional[str] = None
    archived: bool
    tag_type: Optional[str] = None
    tag_class_ids: Optional[list[int]] = None
    tag_category_ids: Optional[list[int]] = None
    tag_all_parents: bool
    tag_boosters: bool
    tag_volunteers: bool
    created_at: datetime
    updated_at: datetime


class EventChangeLogResponse(ApiModel):
    id: int
    event_id: int
    admin_id: Optional[int] = None
    admin_username: Optional[str] = None
    action: str
    changes: Optional[dict[str, Any]] = None
    created_at: datetime
