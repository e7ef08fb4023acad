"""Global exception handlers that render errors in the response envelope."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from libs.common.logging import get_logger
from libs.common.responses import fail

logger = get_logger(__name__)


def _format_validation_error(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    message = error.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=fail(message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [_format_validation_error(error) for error in exc.errors()]
    logger.info(
        "Validation error",
        extra={"extra_fields": {"errors": errors}},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=fail("Validation error", errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=fail("Internal server error"),
    )


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
