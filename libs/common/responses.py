"""Response envelope shared by every API route.

Every response body has the shape
``{"success": bool, "data": ..., "message": ..., "errors": [...]}``.
Payload models use camelCase on the wire to match the dashboard.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base schema: snake_case in Python, camelCase in JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    errors: Optional[list[str]] = None


def ok(data: Any = None, message: Optional[str] = None) -> dict[str, Any]:
    return {"success": True, "data": data, "message": message, "errors": None}


def fail(message: str, errors: Optional[list[str]] = None) -> dict[str, Any]:
    return {"success": False, "data": None, "message": message, "errors": errors}


def blank_to_none(value: Any) -> Any:
    """Form fields submit "" for untouched inputs; treat those as absent."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
