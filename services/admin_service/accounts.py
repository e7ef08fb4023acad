"""Admin account provisioning outside the HTTP API."""

from typing import Optional

from libs.auth.security import hash_password
from libs.common.logging import get_logger
from services.admin_service.models import Admin
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class AdminExistsError(ValueError):
    pass


async def create_admin_account(
    session: AsyncSession,
    *,
    email: str,
    username: str,
    password: str,
    first_name: str,
    last_name: str,
    phone: Optional[str] = None,
    is_master: bool = False,
) -> Admin:
    """Create and commit an admin. Raises AdminExistsError on a duplicate."""
    existing = await session.scalar(
        select(Admin.id).where(
            or_(
                func.lower(Admin.email) == email.strip().lower(),
                func.lower(Admin.username) == username.strip().lower(),
            )
        )
    )
    if existing is not None:
        raise AdminExistsError("An admin with this email or username already exists")

    admin = Admin(
        email=email.strip(),
        username=username.strip(),
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        is_master=is_master,
        password_hash=hash_password(password),
    )
    session.add(admin)
    await session.commit()
    await session.refresh(admin)
    logger.info("Admin %s created (master=%s)", admin.username, admin.is_master)
    return admin
