"""FastAPI application entrypoint for the Vortex Athletics API.

One process serves every domain: the gateway includes each service's
routers directly and owns the database engine for all of them.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from libs.db.bootstrap import init_database
from libs.db.config import build_engine, build_session_factory
from services.academy_service.routers import (
    categories_router,
    enrollments_router,
    programs_router,
)
from services.academy_service.routers import public_router as programs_public_router
from services.admin_service.routers import admins_router, auth_router as admin_auth_router
from services.events_service.routers import admin_router as events_admin_router
from services.events_service.routers import public_router as events_public_router
from services.inquiries_service.routers import admin_router as inquiries_admin_router
from services.inquiries_service.routers import public_router as inquiries_public_router
from services.members_service.routers import (
    auth_router as member_auth_router,
    families_router,
    members_router,
)

logger = get_logger(__name__)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(database_url)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        if settings.DB_BOOTSTRAP_ON_STARTUP:
            await init_database(engine)
        logger.info("Vortex Athletics API started on port %s", settings.PORT)
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(
        title="Vortex Athletics API",
        version="1.0.0",
        description="Registrations, programs, members and events for Vortex Athletics.",
        lifespan=lifespan,
    )

    # Application-wide rate limit keyed on client IP
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/api/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok", "timestamp": utc_now().isoformat()}

    # Public site
    app.include_router(inquiries_public_router)
    app.include_router(programs_public_router)
    app.include_router(events_public_router)

    # Authentication
    app.include_router(admin_auth_router)
    app.include_router(member_auth_router)

    # Back office
    app.include_router(admins_router)
    app.include_router(inquiries_admin_router)
    app.include_router(members_router)
    app.include_router(families_router)
    app.include_router(enrollments_router)
    app.include_router(categories_router)
    app.include_router(programs_router)
    app.include_router(events_admin_router)

    return app


app = create_app()
