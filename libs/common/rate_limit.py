"""Rate limiting configuration for the Vortex Athletics API.

Uses slowapi with an application-wide limit shared by every /api/ route,
keyed on the client IP.
"""

from functools import lru_cache

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def _get_client_ip(request: Request) -> str:
    """
    Get client IP from request, handling proxies.

    Checks X-Forwarded-For header first (for proxied requests),
    then falls back to direct connection IP.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain (original client)
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


@lru_cache
def get_limiter() -> Limiter:
    """
    Create and return a cached Limiter instance.

    The application limit is shared across routes, so a client gets one
    budget for the whole API rather than one per endpoint.
    """
    settings = get_settings()

    return Limiter(
        key_func=_get_client_ip,
        application_limits=[settings.RATE_LIMIT],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
    )


limiter = get_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Custom handler for rate limit exceeded errors.

    Returns the standard envelope with a retry-after header.
    """
    logger.warning(
        "Rate limit exceeded",
        extra={"extra_fields": {"client": _get_client_ip(request), "limit": exc.detail}},
    )
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "data": None,
            "message": RATE_LIMIT_MESSAGE,
            "errors": None,
        },
        headers={"Retry-After": str(getattr(exc, "retry_after", 900))},
    )
