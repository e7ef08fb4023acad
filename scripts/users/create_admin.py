#!/usr/bin/env python3
"""
Create an admin account. The password is prompted for, never passed on
the command line.

USAGE:
  python scripts/users/create_admin.py owner@vortexathletics.com owner \
      --first-name Jane --last-name Doe --master --env prod
"""

import getpass
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.auth.security import MAX_PASSWORD_BYTES  # noqa: E402
from libs.common.cli import load_env, run_script, script_parser, script_session  # noqa: E402
from services.admin_service.accounts import (  # noqa: E402
    AdminExistsError,
    create_admin_account,
)

MIN_PASSWORD_LENGTH = 8


def prompt_password() -> str:
    password = getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise SystemExit(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise SystemExit(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    if password != getpass.getpass("Confirm password: "):
        raise SystemExit("Passwords do not match")
    return password


async def main(args, password: str) -> int:
    async with script_session() as session:
        try:
            admin = await create_admin_account(
                session,
                email=args.email,
                username=args.username,
                password=password,
                first_name=args.first_name,
                last_name=args.last_name,
                is_master=args.master,
            )
        except AdminExistsError as exc:
            print(str(exc))
            return 1

    kind = "Master admin" if admin.is_master else "Admin"
    print(f"{kind} {admin.username} created (id {admin.id})")
    return 0


if __name__ == "__main__":
    parser = script_parser("Create an admin account")
    parser.add_argument("email")
    parser.add_argument("username")
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--last-name", required=True)
    parser.add_argument("--master", action="store_true", help="Grant master admin rights")
    args = parser.parse_args()
    load_env(args.env)
    password = prompt_password()
    sys.exit(run_script(main(args, password)))
