from typing import Optional

from pydantic import BaseModel, Field

ADMIN_ROLE = "admin"
MEMBER_ROLE = "member"


class AuthUser(BaseModel):
    """
    Claims carried by an access token issued by the login endpoints.
    """

    user_id: int = Field(..., alias="sub")
    role: str
    email: Optional[str] = None
    username: Optional[str] = None
    is_master: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
