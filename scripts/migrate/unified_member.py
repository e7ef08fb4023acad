#!/usr/bin/env python3
"""
Merge the legacy identity tables (app_user, athlete, members) into the
unified ``member`` table.

Every step runs in one transaction: either everything is migrated or
nothing is. Safe to re-run; rows already migrated are left alone.

USAGE:
  # Preview (runs every step, then rolls back):
  python scripts/migrate/unified_member.py --env prod --dry-run

  # Migrate:
  python scripts/migrate/unified_member.py --env prod

  # Match athlete names ignoring case and surrounding spaces:
  python scripts/migrate/unified_member.py --env prod --normalize-names
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.common.cli import load_env, run_script, script_parser, script_session  # noqa: E402
from services.members_service.migration import run_unified_member_migration  # noqa: E402


async def main(dry_run: bool, normalize_names: bool) -> int:
    async with script_session() as session:
        report = await run_unified_member_migration(
            session, normalize_names=normalize_names, dry_run=dry_run
        )

    print()
    print("DRY RUN: all changes rolled back" if dry_run else "Migration committed")
    for line in report.summary_lines():
        print(f"  {line}")
    return 0


if __name__ == "__main__":
    parser = script_parser("Migrate legacy identities into the unified member table")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run every step and roll back instead of committing",
    )
    parser.add_argument(
        "--normalize-names",
        action="store_true",
        help="Match athlete names case-insensitively, ignoring surrounding spaces",
    )
    args = parser.parse_args()
    load_env(args.env)
    sys.exit(run_script(main(args.dry_run, args.normalize_names)))
