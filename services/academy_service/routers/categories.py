"""Admin program categories router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.academy_service.models import Program, ProgramCategory
from services.academy_service.routers._shared import get_category_or_404
from services.academy_service.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
)
from services.admin_service.dependencies import get_current_admin
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(
    prefix="/api/admin/categories",
    tags=["admin-categories"],
    dependencies=[Depends(get_current_admin)],
)
logger = get_logger(__name__)


async def _ensure_name_free(
    db: AsyncSession, name: str, exclude_id: Optional[int] = None
) -> None:
    query = select(ProgramCategory.id).where(
        func.lower(ProgramCategory.name) == name.strip().lower()
    )
    if exclude_id is not None:
        query = query.where(ProgramCategory.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A category with this name already exists",
        )


@router.get("", response_model=ApiResponse[List[CategoryResponse]])
async def list_categories(
    archived: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_async_db),
):
    """List categories; ``archived`` filters on the flag when given."""
    query = select(ProgramCategory).order_by(ProgramCategory.display_name)
    if archived is not None:
        query = query.where(ProgramCategory.archived.is_(archived))
    result = await db.execute(query)
    return ok([CategoryResponse.model_validate(c) for c in result.scalars().all()])


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    category_in: CategoryCreate,
    db: AsyncSession = Depends(get_async_db),
):
    await _ensure_name_free(db, category_in.name)
    category = ProgramCategory(**category_in.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return ok(CategoryResponse.model_validate(category), "Category created successfully")


@router.put("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def update_category(
    category_id: int,
    category_in: CategoryUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    category = await get_category_or_404(db, category_id)
    updates = category_in.model_dump(exclude_unset=True)
    if updates.get("name"):
        await _ensure_name_free(db, updates["name"], exclude_id=category.id)
    for field, value in updates.items():
        if value is None and field != "description":
            continue
        setattr(category, field, value)
    await db.commit()
    await db.refresh(category)
    return ok(CategoryResponse.model_validate(category), "Category updated successfully")


@router.patch("/{category_id}/archive", response_model=ApiResponse[CategoryResponse])
async def archive_category(category_id: int, db: AsyncSession = Depends(get_async_db)):
    category = await get_category_or_404(db, category_id)
    category.archived = True
    await db.commit()
    await db.refresh(category)
    return ok(CategoryResponse.model_validate(category), "Category archived successfully")


@router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(category_id: int, db: AsyncSession = Depends(get_async_db)):
    category = await get_category_or_404(db, category_id)
    in_use = await db.scalar(
        select(func.count(Program.id)).where(Program.category_id == category.id)
    )
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category is used by {in_use} program(s); archive it instead",
        )
    await db.delete(category)
    await db.commit()
    logger.info("Category %s deleted", category_id)
    return ok(message="Category deleted successfully")
