"""Admin programs router, including each program's class iterations."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.academy_service.models import ClassIteration, MemberProgram, Program
from services.academy_service.routers._shared import (
    get_category_or_404,
    get_iteration_or_404,
    get_program_or_404,
    load_program_response,
    program_response,
    program_with_category_query,
)
from services.academy_service.schemas import (
    IterationCreate,
    IterationResponse,
    IterationUpdate,
    ProgramCreate,
    ProgramResponse,
    ProgramUpdate,
    iteration_window_errors,
)
from services.admin_service.dependencies import get_current_admin
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(
    prefix="/api/admin/programs",
    tags=["admin-programs"],
    dependencies=[Depends(get_current_admin)],
)
logger = get_logger(__name__)

PROGRAM_REQUIRED_FIELDS = {"name", "display_name", "is_active", "archived"}
ITERATION_REQUIRED_FIELDS = {"days_of_week", "duration_type"}


# --- Programs ---


@router.get("", response_model=ApiResponse[List[ProgramResponse]])
async def list_programs(
    archived: Optional[bool] = Query(None),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    db: AsyncSession = Depends(get_async_db),
):
    query = program_with_category_query()
    if archived is not None:
        query = query.where(Program.archived.is_(archived))
    if category_id is not None:
        query = query.where(Program.category_id == category_id)
    query = query.order_by(Program.display_name, Program.id)
    rows = (await db.execute(query)).all()
    return ok([program_response(program, category) for program, category in rows])


@router.get("/{program_id}", response_model=ApiResponse[ProgramResponse])
async def get_program(program_id: int, db: AsyncSession = Depends(get_async_db)):
    return ok(await load_program_response(db, program_id))


@router.post(
    "",
    response_model=ApiResponse[ProgramResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_program(
    program_in: ProgramCreate,
    db: AsyncSession = Depends(get_async_db),
):
    if program_in.category_id is not None:
        await get_category_or_404(db, program_in.category_id)
    program = Program(**program_in.model_dump())
    db.add(program)
    await db.commit()
    logger.info("Program %s created", program.id)
    return ok(await load_program_response(db, program.id), "Program created successfully")


@router.put("/{program_id}", response_model=ApiResponse[ProgramResponse])
async def update_program(
    program_id: int,
    program_in: ProgramUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    program = await get_program_or_404(db, program_id)
    updates = program_in.model_dump(exclude_unset=True)
    if updates.get("category_id") is not None:
        await get_category_or_404(db, updates["category_id"])

    for field, value in updates.items():
        if value is None and field in PROGRAM_REQUIRED_FIELDS:
            continue
        setattr(program, field, value)
    if (
        program.age_min is not None
        and program.age_max is not None
        and program.age_min > program.age_max
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ageMin must not be greater than ageMax",
        )

    await db.commit()
    return ok(await load_program_response(db, program.id), "Program updated successfully")


@router.patch("/{program_id}/archive", response_model=ApiResponse[ProgramResponse])
async def archive_program(program_id: int, db: AsyncSession = Depends(get_async_db)):
    program = await get_program_or_404(db, program_id)
    program.archived = True
    program.is_active = False
    await db.commit()
    return ok(await load_program_response(db, program.id), "Program archived successfully")


@router.delete("/{program_id}", response_model=ApiResponse[None])
async def delete_program(program_id: int, db: AsyncSession = Depends(get_async_db)):
    """Delete a program with its iterations and enrollments."""
    program = await get_program_or_404(db, program_id)
    await db.execute(delete(MemberProgram).where(MemberProgram.program_id == program.id))
    await db.execute(delete(ClassIteration).where(ClassIteration.program_id == program.id))
    await db.delete(program)
    await db.commit()
    logger.info("Program %s deleted", program_id)
    return ok(message="Program deleted successfully")


# --- Class Iterations ---


@router.get(
    "/{program_id}/iterations",
    response_model=ApiResponse[List[IterationResponse]],
)
async def list_iterations(program_id: int, db: AsyncSession = Depends(get_async_db)):
    await get_program_or_404(db, program_id)
    result = await db.execute(
        select(ClassIteration)
        .where(ClassIteration.program_id == program_id)
        .order_by(ClassIteration.iteration_number)
    )
    return ok([IterationResponse.model_validate(i) for i in result.scalars().all()])


@router.post(
    "/{program_id}/iterations",
    response_model=ApiResponse[IterationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_iteration(
    program_id: int,
    iteration_in: IterationCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Add an iteration; numbers run 1, 2, 3... within each program."""
    await get_program_or_404(db, program_id)
    last_number = await db.scalar(
        select(func.max(ClassIteration.iteration_number)).where(
            ClassIteration.program_id == program_id
        )
    )
    data = iteration_in.model_dump()
    data["duration_type"] = iteration_in.duration_type.value
    iteration = ClassIteration(
        program_id=program_id,
        iteration_number=(last_number or 0) + 1,
        **data,
    )
    db.add(iteration)
    await db.commit()
    await db.refresh(iteration)
    return ok(IterationResponse.model_validate(iteration), "Iteration created successfully")


@router.put(
    "/{program_id}/iterations/{iteration_id}",
    response_model=ApiResponse[IterationResponse],
)
async def update_iteration(
    program_id: int,
    iteration_id: int,
    iteration_in: IterationUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    iteration = await get_iteration_or_404(db, program_id, iteration_id)
    updates = iteration_in.model_dump(exclude_unset=True)
    if updates.get("duration_type") is not None:
        updates["duration_type"] = updates["duration_type"].value

    for field, value in updates.items():
        if value is None and field in ITERATION_REQUIRED_FIELDS:
            continue
        setattr(iteration, field, value)

    errors = iteration_window_errors(
        iteration.duration_type,
        iteration.start_date,
        iteration.end_date,
        iteration.start_time,
        iteration.end_time,
    )
    if errors:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="; ".join(errors))

    await db.commit()
    await db.refresh(iteration)
    return ok(IterationResponse.model_validate(iteration), "Iteration updated successfully")


@router.delete(
    "/{program_id}/iterations/{iteration_id}",
    response_model=ApiResponse[None],
)
async def delete_iteration(
    program_id: int,
    iteration_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Delete an iteration. Enrollments in it stay enrolled in the program."""
    iteration = await get_iteration_or_404(db, program_id, iteration_id)
    await db.execute(
        update(MemberProgram)
        .where(MemberProgram.iteration_id == iteration.id)
        .values(iteration_id=None)
    )
    await db.delete(iteration)
    await db.commit()
    return ok(message="Iteration deleted successfully")
