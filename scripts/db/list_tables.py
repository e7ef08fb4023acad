#!/usr/bin/env python3
"""
List every table with its row count, flagging legacy identity tables.

USAGE:
  python scripts/db/list_tables.py --env prod
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.common.cli import load_env, run_script, script_parser, script_session  # noqa: E402
from libs.db.introspection import table_names  # noqa: E402
from services.members_service.models import LEGACY_MEMBER_TABLES  # noqa: E402
from sqlalchemy import func, select, table  # noqa: E402

LEGACY_TABLES = set(LEGACY_MEMBER_TABLES) | {"athlete_program"}


async def main() -> int:
    async with script_session() as session:
        names = sorted(await table_names(session))
        if not names:
            print("No tables found")
            return 0
        width = max(len(name) for name in names)
        for name in names:
            count = await session.scalar(select(func.count()).select_from(table(name)))
            flag = "  (legacy)" if name in LEGACY_TABLES else ""
            print(f"{name.ljust(width)}  {count:>8}{flag}")
    return 0


if __name__ == "__main__":
    args = script_parser("List tables and row counts").parse_args()
    load_env(args.env)
    sys.exit(run_script(main()))
