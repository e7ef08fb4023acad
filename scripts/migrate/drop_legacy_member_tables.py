#!/usr/bin/env python3
"""
DROP the legacy identity tables (members, member_children, athlete).

!!! DANGER: This is IRREVERSIBLE. Only run AFTER confirming the data
migration was successful. !!!

PREREQUISITES:
  1. Run: python scripts/migrate/verify_unified_member.py --env prod
  2. Take a database backup BEFORE running this script

USAGE:
  # Preview only (shows what would be dropped):
  python scripts/migrate/drop_legacy_member_tables.py --env prod

  # Drop:
  python scripts/migrate/drop_legacy_member_tables.py --env prod --confirm
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.common.cli import load_env, run_script, script_parser, script_session  # noqa: E402
from services.members_service.migration import cleanup_legacy_tables  # noqa: E402


async def main(confirm: bool) -> int:
    async with script_session() as session:
        report = await cleanup_legacy_tables(session, confirm=confirm)

    if not report.member_table_exists:
        print("The member table does not exist. Run the migration first.")
        return 1

    print(f"member rows: {report.member_count}")
    for check in report.checks:
        if not check.exists:
            print(f"  {check.name}: does not exist (already dropped?)")
        elif check.safe:
            print(f"  {check.name}: {check.row_count} rows, safe to drop")
        else:
            print(f"  {check.name}: NOT safe to drop ({check.reason})")

    if not report.safe_to_drop:
        print()
        print("Refusing to drop: legacy tables still hold unmigrated rows.")
        return 1
    if not confirm:
        print()
        print("DRY RUN: No tables dropped.")
        print("Add --confirm to actually drop the tables.")
        return 0

    print()
    print(f"Dropped: {', '.join(report.dropped) or 'nothing'}")
    return 0


if __name__ == "__main__":
    parser = script_parser("Drop legacy member tables (IRREVERSIBLE)")
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Actually drop the tables (without this flag, it's a dry run)",
    )
    args = parser.parse_args()
    load_env(args.env)
    sys.exit(run_script(main(args.confirm)))
