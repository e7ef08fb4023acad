"""Lookups and response builders shared by the academy routers."""

from typing import Optional

from fastapi import HTTPException
from services.academy_service.models import ClassIteration, Program, ProgramCategory
from services.academy_service.schemas import ProgramResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


async def get_category_or_404(db: AsyncSession, category_id: int) -> ProgramCategory:
    category = await db.get(ProgramCategory, category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


async def get_program_or_404(db: AsyncSession, program_id: int) -> Program:
    program = await db.get(Program, program_id)
    if program is None:
        raise HTTPException(status_code=404, detail="Program not found")
    return program


async def get_iteration_or_404(
    db: AsyncSession, program_id: int, iteration_id: int
) -> ClassIteration:
    iteration = await db.get(ClassIteration, iteration_id)
    if iteration is None or iteration.program_id != program_id:
        raise HTTPException(status_code=404, detail="Iteration not found")
    return iteration


def program_response(
    program: Program, category: Optional[ProgramCategory]
) -> ProgramResponse:
    response = ProgramResponse.model_validate(program)
    if category is not None:
        response.category_name = category.name
        response.category_display_name = category.display_name
    return response


def program_with_category_query():
    return select(Program, ProgramCategory).outerjoin(
        ProgramCategory, ProgramCategory.id == Program.category_id
    )


async def load_program_response(db: AsyncSession, program_id: int) -> ProgramResponse:
    row = (
        await db.execute(program_with_category_query().where(Program.id == program_id))
    ).first()
    if row is None:
        raise HTTPException(status_code=404, detail="Program not found")
    return program_response(*row)
