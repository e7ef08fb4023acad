#!/usr/bin/env python3
"""
Seed sample events when the events table is empty.

USAGE:
  python scripts/seed/events.py --env dev
  python scripts/seed/events.py --env dev --force   # add them anyway
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.common.cli import load_env, run_script, script_parser, script_session  # noqa: E402
from services.events_service.services.seed import seed_sample_events  # noqa: E402


async def main(force: bool) -> int:
    async with script_session() as session:
        created = await seed_sample_events(session, force=force)
    if created:
        print(f"Seeded {created} events")
    else:
        print("Events already exist. Skipping seed (use --force to add anyway).")
    return 0


if __name__ == "__main__":
    parser = script_parser("Seed sample events")
    parser.add_argument("--force", action="store_true")
    args = parser.parse_args()
    load_env(args.env)
    sys.exit(run_script(main(args.force)))
