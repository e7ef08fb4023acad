#!/usr/bin/env python3
"""
Create missing tables and columns and seed the default facility.

USAGE:
  python scripts/db/init_db.py --env prod
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.common.cli import load_env, run_script, script_parser  # noqa: E402
from libs.db.bootstrap import init_database  # noqa: E402
from libs.db.config import build_engine  # noqa: E402


async def main() -> int:
    engine = build_engine()
    try:
        report = await init_database(engine)
    finally:
        await engine.dispose()

    print(f"Tables created: {len(report.created_tables)}")
    print(f"Columns added:  {len(report.added_columns)}")
    print("Default facility seeded" if report.seeded_facility else "Facility already present")
    return 0


if __name__ == "__main__":
    args = script_parser("Bootstrap the database schema").parse_args()
    load_env(args.env)
    sys.exit(run_script(main()))
