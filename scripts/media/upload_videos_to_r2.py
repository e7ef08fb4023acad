#!/usr/bin/env python3
"""
Upload site videos and poster images to Cloudflare R2.

Requires R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY, R2_BUCKET
and R2_ENDPOINT. Set VERSION for versioned, immutable-cached keys and
CDN_BASE_URL to print the public URLs.

USAGE:
  # The default hero video set from ./public:
  python scripts/media/upload_videos_to_r2.py --env local

  # Specific files, uploaded under videos/:
  python scripts/media/upload_videos_to_r2.py public/promo.mp4 public/promo.jpg
"""

import mimetypes
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.common.cli import load_env, script_parser  # noqa: E402
from libs.common.config import get_settings  # noqa: E402
from services.media_service.storage import R2Uploader  # noqa: E402

PUBLIC_DIR = PROJECT_ROOT / "public"
REMOTE_PREFIX = "videos"

# (file name, content type, optional)
DEFAULT_FILES = (
    ("landing_page_hero.mp4", "video/mp4", False),
    ("vald_sprints.mp4", "video/mp4", False),
    ("landing_page_hero.webp", "image/webp", True),
    ("landing_page_hero.jpg", "image/jpeg", True),
    ("landing_page_hero.png", "image/png", True),
)


def planned_uploads(files: list[str]) -> list[tuple[Path, str, str, bool]]:
    if not files:
        return [
            (PUBLIC_DIR / name, f"{REMOTE_PREFIX}/{name}", content_type, optional)
            for name, content_type, optional in DEFAULT_FILES
        ]
    uploads = []
    for name in files:
        path = Path(name)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        uploads.append((path, f"{REMOTE_PREFIX}/{path.name}", content_type, False))
    return uploads


def main(files: list[str]) -> int:
    settings = get_settings()
    missing = settings.missing_r2_settings
    if missing:
        print("Missing required environment variables:")
        for name in missing:
            print(f"   - {name}")
        return 1

    uploader = R2Uploader(settings)
    print(f"Bucket: {settings.R2_BUCKET}  Endpoint: {settings.R2_ENDPOINT}")
    if settings.VERSION:
        print(f"Version: {settings.VERSION} (immutable caching)")
    else:
        print("Cache: 1 day (non-versioned)")

    results = [uploader.upload(*upload) for upload in planned_uploads(files)]
    for result in results:
        line = f"  [{result.status}] {result.remote_key}"
        if result.cdn_url:
            line += f" -> {result.cdn_url}"
        if result.error:
            line += f" ({result.error})"
        print(line)

    uploaded = sum(1 for r in results if r.status == "uploaded")
    skipped = sum(1 for r in results if r.status == "skipped")
    errors = sum(1 for r in results if r.status == "error")
    print(f"Uploaded: {uploaded}  Skipped: {skipped}  Errors: {errors}")
    return 1 if errors else 0


if __name__ == "__main__":
    parser = script_parser("Upload videos and posters to Cloudflare R2")
    parser.add_argument("files", nargs="*", help="Files to upload (default: hero set)")
    args = parser.parse_args()
    load_env(args.env)
    sys.exit(main(args.files))
