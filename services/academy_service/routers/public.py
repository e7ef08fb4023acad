"""Public academy routes for the marketing site."""

from typing import List

from fastapi import APIRouter, Depends
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.academy_service.models import Program
from services.academy_service.routers._shared import (
    program_response,
    program_with_category_query,
)
from services.academy_service.schemas import ProgramResponse
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api", tags=["programs"])


@router.get("/programs", response_model=ApiResponse[List[ProgramResponse]])
async def list_public_programs(db: AsyncSession = Depends(get_async_db)):
    """Active, non-archived programs."""
    query = (
        program_with_category_query()
        .where(Program.is_active.is_(True), Program.archived.is_(False))
        .order_by(Program.display_name, Program.id)
    )
    rows = (await db.execute(query)).all()
    return ok([program_response(program, category) for program, category in rows])
