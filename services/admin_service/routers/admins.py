"""Admin account management."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.security import hash_password
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, ok
from libs.db.session import get_async_db
from services.admin_service.dependencies import get_current_admin, require_master_admin
from services.admin_service.models import Admin
from services.admin_service.schemas import AdminCreate, AdminResponse, AdminUpdate
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/admin/admins", tags=["admin-accounts"])
logger = get_logger(__name__)


async def _ensure_unique(
    db: AsyncSession, email: str | None, username: str | None, exclude_id: int | None = None
) -> None:
    conditions = []
    if email:
        conditions.append(func.lower(Admin.email) == email.lower())
    if username:
        conditions.append(Admin.username == username)
    if not conditions:
        return

    query = select(Admin).where(or_(*conditions))
    if exclude_id is not None:
        query = query.where(Admin.id != exclude_id)
    existing = (await db.execute(query)).scalars().first()
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An admin with that email or username already exists",
        )


@router.get("", response_model=ApiResponse[List[AdminResponse]])
async def list_admins(
    current_admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(Admin).order_by(Admin.created_at.desc(), Admin.id.desc()))
    admins = result.scalars().all()
    return ok([AdminResponse.model_validate(a) for a in admins])


@router.get("/me", response_model=ApiResponse[AdminResponse])
async def get_me(current_admin: Admin = Depends(get_current_admin)):
    return ok(AdminResponse.model_validate(current_admin))


@router.post(
    "",
    response_model=ApiResponse[AdminResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_admin(
    admin_in: AdminCreate,
    current_admin: Admin = Depends(require_master_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create an admin account (master admins only)."""
    await _ensure_unique(db, admin_in.email, admin_in.username)

    data = admin_in.model_dump(exclude={"password"})
    admin = Admin(**data, password_hash=hash_password(admin_in.password))
    db.add(admin)
    await db.commit()
    await db.refresh(admin)

    logger.info("Admin %s created by %s", admin.username, current_admin.username)
    return ok(AdminResponse.model_validate(admin), "Admin created successfully")


@router.put("/{admin_id}", response_model=ApiResponse[AdminResponse])
async def update_admin(
    admin_id: int,
    admin_in: AdminUpdate,
    current_admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update an admin. Admins may edit themselves; master admins anyone."""
    if admin_id != current_admin.id and not current_admin.is_master:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only update your own account",
        )

    admin = await db.get(Admin, admin_id)
    if admin is None:
        raise HTTPException(status_code=404, detail="Admin not found")

    updates = admin_in.model_dump(exclude_unset=True)
    if "is_master" in updates and not current_admin.is_master:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only master admins can change master status",
        )
    await _ensure_unique(db, updates.get("email"), updates.get("username"), exclude_id=admin.id)

    password = updates.pop("password", None)
    if password:
        admin.password_hash = hash_password(password)
    for field, value in updates.items():
        # phone is the only nullable column
        if value is None and field != "phone":
            continue
        setattr(admin, field, value)

    await db.commit()
    await db.refresh(admin)
    return ok(AdminResponse.model_validate(admin), "Admin updated successfully")


@router.delete("/{admin_id}", response_model=ApiResponse[None])
async def delete_admin(
    admin_id: int,
    current_admin: Admin = Depends(require_master_admin),
    db: AsyncSession = Depends(get_async_db),
):
    if admin_id == current_admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )

    admin = await db.get(Admin, admin_id)
    if admin is None:
        raise HTTPException(status_code=404, detail="Admin not found")

    await db.delete(admin)
    await db.commit()
    logger.info("Admin %s deleted by %s", admin.username, current_admin.username)
    return ok(message="Admin deleted successfully")
