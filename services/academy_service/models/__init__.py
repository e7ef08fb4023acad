"""Academy Service models package."""

from services.academy_service.models.enrollment import MemberProgram
from services.academy_service.models.enums import DurationType
from services.academy_service.models.program import (
    ClassIteration,
    Program,
    ProgramCategory,
)

__all__ = [
    "ClassIteration",
    "DurationType",
    "MemberProgram",
    "Program",
    "ProgramCategory",
]
