"""Unit tests for settings assembly."""

import pytest
from libs.common.config import DEFAULT_JWT_SECRET, Settings
from pydantic import ValidationError


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


@pytest.mark.unit
class TestDatabaseUrl:
    def test_postgres_scheme_is_rewritten_for_psycopg(self):
        settings = _settings(DATABASE_URL="postgres://u:p@db.example.com:5432/gym")
        assert settings.DATABASE_URL == "postgresql+psycopg://u:p@db.example.com:5432/gym"

    def test_db_url_used_when_database_url_missing(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = _settings(DB_URL="postgresql://u:p@host/gym")
        assert settings.DATABASE_URL == "postgresql+psycopg://u:p@host/gym"

    def test_assembled_from_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("DB_URL", raising=False)
        settings = _settings(
            DB_USER="coach", DB_PASSWORD="pw", DB_HOST="pg", DB_PORT=6543, DB_NAME="vortex"
        )
        assert settings.DATABASE_URL == "postgresql+psycopg://coach:pw@pg:6543/vortex"

    def test_other_drivers_untouched(self):
        settings = _settings(DATABASE_URL="sqlite+aiosqlite:///:memory:")
        assert settings.DATABASE_URL == "sqlite+aiosqlite:///:memory:"


@pytest.mark.unit
def test_missing_r2_settings_lists_names(monkeypatch):
    for name in ("R2_ACCOUNT_ID", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY", "R2_BUCKET", "R2_ENDPOINT"):
        monkeypatch.delenv(name, raising=False)
    settings = _settings(R2_BUCKET="assets", R2_ACCOUNT_ID="acct")
    assert settings.missing_r2_settings == [
        "R2_ACCESS_KEY_ID",
        "R2_SECRET_ACCESS_KEY",
        "R2_ENDPOINT",
    ]


@pytest.mark.unit
class TestJwtSecret:
    def test_default_secret_refused_in_production(self):
        with pytest.raises(ValidationError, match="JWT_SECRET must be set in production"):
            _settings(ENVIRONMENT="production", JWT_SECRET=DEFAULT_JWT_SECRET)

    def test_default_secret_allowed_outside_production(self):
        settings = _settings(ENVIRONMENT="local", JWT_SECRET=DEFAULT_JWT_SECRET)
        assert settings.is_production is False

    def test_real_secret_accepted_in_production(self):
        settings = _settings(ENVIRONMENT="production", JWT_SECRET="s3cr3t-from-vault")
        assert settings.is_production is True
