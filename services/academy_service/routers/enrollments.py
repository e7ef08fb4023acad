"""Admin enrollment routes (members in programs and iterations)."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.academy_service.models import ClassIteration, MemberProgram, Program
from services.academy_service.routers._shared import get_program_or_404
from services.academy_service.schemas import EnrollmentCreate, EnrollmentResponse
from services.admin_service.dependencies import get_current_admin
from services.members_service.models import Member
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(
    prefix="/api/admin",
    tags=["admin-enrollments"],
    dependencies=[Depends(get_current_admin)],
)
logger = get_logger(__name__)


def _enrollment_query():
    return (
        select(MemberProgram, Program, ClassIteration)
        .join(Program, Program.id == MemberProgram.program_id)
        .outerjoin(ClassIteration, ClassIteration.id == MemberProgram.iteration_id)
    )


def _enrollment_response(
    enrollment: MemberProgram, program: Program, iteration
) -> EnrollmentResponse:
    response = EnrollmentResponse.model_validate(enrollment)
    response.program_name = program.name
    response.program_display_name = program.display_name
    response.iteration_number = iteration.iteration_number if iteration else None
    return response


async def _get_member_or_404(db: AsyncSession, member_id: int) -> Member:
    member = await db.get(Member, member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


@router.get(
    "/members/{member_id}/enrollments",
    response_model=ApiResponse[List[EnrollmentResponse]],
)
async def list_member_enrollments(
    member_id: int, db: AsyncSession = Depends(get_async_db)
):
    await _get_member_or_404(db, member_id)
    rows = (
        await db.execute(
            _enrollment_query()
            .where(MemberProgram.member_id == member_id)
            .order_by(MemberProgram.created_at, MemberProgram.id)
        )
    ).all()
    return ok([_enrollment_response(*row) for row in rows])


@router.post(
    "/members/{member_id}/enrollments",
    response_model=ApiResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def enroll_member(
    member_id: int,
    enrollment_in: EnrollmentCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Enroll a member in a program, optionally in one of its iterations.

    The iteration must belong to the program. Enrolling twice in the same
    program and iteration is rejected.
    """
    await _get_member_or_404(db, member_id)
    await get_program_or_404(db, enrollment_in.program_id)

    if enrollment_in.iteration_id is not None:
        iteration = await db.get(ClassIteration, enrollment_in.iteration_id)
        if iteration is None:
            raise HTTPException(status_code=404, detail="Iteration not found")
        if iteration.program_id != enrollment_in.program_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Iteration does not belong to this program",
            )

    duplicate = select(MemberProgram.id).where(
        MemberProgram.member_id == member_id,
        MemberProgram.program_id == enrollment_in.program_id,
    )
    if enrollment_in.iteration_id is None:
        duplicate = duplicate.where(MemberProgram.iteration_id.is_(None))
    else:
        duplicate = duplicate.where(MemberProgram.iteration_id == enrollment_in.iteration_id)
    if (await db.execute(duplicate)).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Member is already enrolled in this program",
        )

    enrollment = MemberProgram(member_id=member_id, **enrollment_in.model_dump())
    db.add(enrollment)
    await db.commit()

    row = (
        await db.execute(_enrollment_query().where(MemberProgram.id == enrollment.id))
    ).one()
    logger.info(
        "Member %s enrolled in program %s", member_id, enrollment_in.program_id
    )
    return ok(_enrollment_response(*row), "Member enrolled successfully")


@router.delete("/enrollments/{enrollment_id}", response_model=ApiResponse[None])
async def delete_enrollment(enrollment_id: int, db: AsyncSession = Depends(get_async_db)):
    enrollment = await db.get(MemberProgram, enrollment_id)
    if enrollment is None:
        raise HTTPException(status_code=404, detail="Enrollment not found")
    await db.delete(enrollment)
    await db.commit()
    return ok(message="Enrollment removed successfully")
