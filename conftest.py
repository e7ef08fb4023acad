import os

# Pin the settings every test run relies on before anything imports
# libs.common.config: cheap bcrypt, no schema bootstrap at startup.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DB_BOOTSTRAP_ON_STARTUP", "false")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

from libs.common.config import get_settings  # noqa: E402

# Clear cached settings to reload with the test env vars
get_settings.cache_clear()
