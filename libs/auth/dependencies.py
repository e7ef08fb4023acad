from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError

from libs.auth.models import ADMIN_ROLE, MEMBER_ROLE, AuthUser
from libs.auth.security import decode_access_token

security = HTTPBearer(auto_error=False)


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Validate the bearer JWT and return its claims.
    """
    if token is None:
        raise _credentials_exception("Access token required")

    try:
        payload = decode_access_token(token.credentials)
        return AuthUser(**payload)
    except (JWTError, ValidationError):
        raise _credentials_exception("Invalid or expired token")


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    if current_user.role != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


async def require_member(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    if current_user.role != MEMBER_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Member account required",
        )
    return current_user
