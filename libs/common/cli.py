"""Shared plumbing for the operator scripts under ``scripts/``.

Usage:
    parser = script_parser("Describe the script")
    args = parser.parse_args()
    load_env(args.env)
    sys.exit(run_script(main(args)))
"""

import argparse
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Coroutine, Optional

import dotenv
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.config import get_settings
from libs.common.logging import configure_logging, get_logger
from libs.db.config import build_engine, build_session_factory

PROJECT_ROOT = Path(__file__).resolve().parents[2]

logger = get_logger(__name__)


def script_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--env",
        default=None,
        help="Environment name (loads .env.<env>) or path to an env file",
    )
    return parser


def load_env(env: Optional[str]) -> None:
    """Load ``.env.<env>`` (or an explicit path) and reset cached settings."""
    if env:
        candidate = Path(env)
        env_path = candidate if candidate.is_file() else PROJECT_ROOT / f".env.{env}"
        if env_path.is_file():
            dotenv.load_dotenv(env_path, override=True)
        else:
            logger.warning("Env file %s not found; using the process environment", env_path)
    get_settings.cache_clear()
    configure_logging()


@asynccontextmanager
async def script_session(database_url: Optional[str] = None) -> AsyncIterator[AsyncSession]:
    """One engine and one session for the lifetime of a script."""
    engine = build_engine(database_url)
    session_factory = build_session_factory(engine)
    try:
        async with session_factory() as session:
            yield session
    finally:
        await engine.dispose()


def run_script(main: Coroutine) -> int:
    """Run ``main`` and turn its outcome into a process exit code."""
    try:
        result = asyncio.run(main)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 1
    except Exception:
        logger.exception("Script failed")
        return 1
    return 0 if result is None else int(result)
