"""Academy Service schemas package."""

from services.academy_service.schemas.main import (
    WEEKDAYS,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    EnrollmentCreate,
    EnrollmentResponse,
    IterationCreate,
    IterationResponse,
    IterationUpdate,
    ProgramCreate,
    ProgramResponse,
    ProgramUpdate,
    iteration_window_errors,
)

__all__ = [
    "WEEKDAYS",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "EnrollmentCreate",
    "EnrollmentResponse",
    "IterationCreate",
    "IterationResponse",
    "IterationUpdate",
    "ProgramCreate",
    "ProgramResponse",
    "ProgramUpdate",
    "iteration_window_errors",
]
