#!/usr/bin/env python3
"""
Delete a member by email. When the member is a family's primary member
or guardian, the family and its other members are deleted as well.

Everything happens in one transaction.

USAGE:
  # Preview:
  python scripts/users/delete_user.py parent@example.com --env prod

  # Delete:
  python scripts/users/delete_user.py parent@example.com --env prod --confirm
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.common.cli import load_env, run_script, script_parser, script_session  # noqa: E402
from services.members_service.services.deletion import delete_member_by_email  # noqa: E402


async def main(email: str, confirm: bool) -> int:
    async with script_session() as session:
        report = await delete_member_by_email(session, email, dry_run=not confirm)

    if report is None:
        print(f"No member found with email {email}")
        return 1

    print(f"Members: {report.member_ids}")
    print(f"Families: {report.family_ids or 'none'}")
    if not confirm:
        print()
        print("DRY RUN: nothing deleted. Add --confirm to delete.")
    else:
        print()
        print(f"Deleted {len(report.member_ids)} member(s) and {len(report.family_ids)} family(ies)")
    return 0


if __name__ == "__main__":
    parser = script_parser("Delete a member (and their family) by email")
    parser.add_argument("email")
    parser.add_argument("--confirm", action="store_true", help="Actually delete")
    args = parser.parse_args()
    load_env(args.env)
    sys.exit(run_script(main(args.email, args.confirm)))
