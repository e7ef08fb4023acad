from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from libs.common.config import get_settings


def build_engine(url: Optional[str] = None, **overrides) -> AsyncEngine:
    """
    Create the async engine for the given URL (defaults to DATABASE_URL).

    Pool sizing only applies to server databases; SQLite engines get the
    driver defaults unless the caller overrides them.
    """
    settings = get_settings()
    url = url or settings.DATABASE_URL

    options = {
        "echo": settings.ENVIRONMENT == "local" and settings.LOG_LEVEL == "DEBUG",
        "future": True,
    }
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_pre_ping=True,  # Test connections before using
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    options.update(overrides)
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
