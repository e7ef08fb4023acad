from functools import lru_cache
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production", "test"] = "local"
    LOG_LEVEL: str = "INFO"
    PORT: int = 3001
    FRONTEND_URL: str = "http://localhost:5173"
    TIMEZONE: str = "America/New_York"
    DEFAULT_FACILITY_NAME: str = "Vortex Athletics"

    # Database
    # DATABASE_URL wins, then DB_URL, then the discrete DB_* parts.
    DATABASE_URL: Optional[str] = None
    DB_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "vortex_athletics"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "password"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_BOOTSTRAP_ON_STARTUP: bool = True

    # Auth
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 12
    BCRYPT_ROUNDS: int = 12

    # Rate limiting (applies to every /api/ route, per client IP)
    RATE_LIMIT: str = "100 per 15 minutes"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Cloudflare R2 / CDN (asset upload script)
    R2_ACCOUNT_ID: Optional[str] = None
    R2_ACCESS_KEY_ID: Optional[str] = None
    R2_SECRET_ACCESS_KEY: Optional[str] = None
    R2_BUCKET: Optional[str] = None
    R2_ENDPOINT: Optional[str] = None
    CDN_BASE_URL: Optional[str] = None
    VERSION: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @model_validator(mode="after")
    def assemble_db_connection(self) -> "Settings":
        url = self.DATABASE_URL or self.DB_URL
        if not url:
            url = (
                f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.DATABASE_URL = url
        return self

    @model_validator(mode="after")
    def require_real_jwt_secret(self) -> "Settings":
        if self.is_production and self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def missing_r2_settings(self) -> list[str]:
        required = {
            "R2_ACCOUNT_ID": self.R2_ACCOUNT_ID,
            "R2_ACCESS_KEY_ID": self.R2_ACCESS_KEY_ID,
            "R2_SECRET_ACCESS_KEY": self.R2_SECRET_ACCESS_KEY,
            "R2_BUCKET": self.R2_BUCKET,
            "R2_ENDPOINT": self.R2_ENDPOINT,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
