#!/usr/bin/env python3
"""
Report legacy identities that have no unified member yet.

Exits 1 when anything is left unmigrated.

USAGE:
  python scripts/migrate/verify_unified_member.py --env prod
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.common.cli import load_env, run_script, script_parser, script_session  # noqa: E402
from services.members_service.migration import verify_unified_member_migration  # noqa: E402


async def main(normalize_names: bool) -> int:
    async with script_session() as session:
        report = await verify_unified_member_migration(
            session, normalize_names=normalize_names
        )

    for line in report.summary_lines():
        print(line)
    if report.unmatched_app_users:
        print(f"  app_user ids: {report.unmatched_app_users}")
    if report.unmatched_athletes:
        print(f"  athlete ids: {report.unmatched_athletes}")
    if report.unmigrated_legacy_members:
        print(f"  members ids: {report.unmigrated_legacy_members}")
    return 0 if report.all_migrated else 1


if __name__ == "__main__":
    parser = script_parser("Verify the unified member migration")
    parser.add_argument("--normalize-names", action="store_true")
    args = parser.parse_args()
    load_env(args.env)
    sys.exit(run_script(main(args.normalize_names)))
