"""Password hashing (bcrypt) and access-token signing (HS256 JWT)."""

from datetime import timedelta
from typing import Any, Optional

import bcrypt
from jose import jwt

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def check_password_length(password: Optional[str]) -> Optional[str]:
    """Raise ValueError for passwords bcrypt cannot hash. Usable as a pydantic validator."""
    if password is not None and len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    check_password_length(password)
    rounds = rounds or get_settings().BCRYPT_ROUNDS
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a password against a stored bcrypt hash; False on any mismatch."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash (e.g. a legacy placeholder value)
        return False


def create_access_token(
    subject: Any,
    role: str,
    expires_minutes: Optional[int] = None,
    **claims: Any,
) -> str:
    settings = get_settings()
    now = utc_now()
    expire = now + timedelta(minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload = {
        "sub": str(subject),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
        **claims,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a token. Raises jose.JWTError when invalid or expired."""
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
