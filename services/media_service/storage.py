"""Upload static assets (videos, poster images) to Cloudflare R2."""

import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from libs.common.config import Settings, get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

VERSIONED_CACHE_CONTROL = "public, max-age=31536000, immutable"
DEFAULT_CACHE_CONTROL = "public, max-age=86400"

UploadStatus = Literal["uploaded", "skipped", "error"]


def cache_control(version: Optional[str]) -> str:
    """Versioned keys never change, so they may be cached for a year."""
    return VERSIONED_CACHE_CONTROL if version else DEFAULT_CACHE_CONTROL


def versioned_key(remote_key: str, version: Optional[str]) -> str:
    """``videos/hero.mp4`` with version ``3`` -> ``videos/hero.v3.mp4``."""
    if not version:
        return remote_key
    stem, ext = posixpath.splitext(remote_key)
    return f"{stem}.v{version}{ext}"


def cdn_url(base_url: Optional[str], remote_key: str) -> Optional[str]:
    if not base_url:
        return None
    return f"{base_url.rstrip('/')}/{remote_key.lstrip('/')}"


@dataclass
class UploadResult:
    local_path: str
    remote_key: str
    status: UploadStatus
    size_bytes: int = 0
    overwritten: bool = False
    cdn_url: Optional[str] = None
    error: Optional[str] = None


class R2Uploader:
    """
    Thin wrapper over a boto3 S3 client pointed at an R2 endpoint.

    Pass ``client`` to reuse an existing client (tests pass a stubbed one).
    """

    def __init__(self, settings: Optional[Settings] = None, client=None):
        self.settings = settings or get_settings()
        missing = self.settings.missing_r2_settings
        if client is None and missing:
            raise ValueError(f"Missing R2 settings: {', '.join(missing)}")
        self.bucket = self.settings.R2_BUCKET
        self.version = self.settings.VERSION
        self.client = client or boto3.client(
            "s3",
            endpoint_url=self.settings.R2_ENDPOINT,
            aws_access_key_id=self.settings.R2_ACCESS_KEY_ID,
            aws_secret_access_key=self.settings.R2_SECRET_ACCESS_KEY,
            region_name="auto",
        )

    def _exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in ("404", "NoSuchKey", "NotFound"):
                return False
            raise
        return True

    def upload(
        self,
        local_path: Union[str, Path],
        remote_key: str,
        content_type: str,
        optional: bool = False,
    ) -> UploadResult:
        """
        Upload one file. A missing optional file is skipped; a missing
        required file or a failed request is reported as an error.
        """
        path = Path(local_path)
        key = versioned_key(remote_key, self.version)
        if not path.is_file():
            if optional:
                logger.info("Skipping optional file %s", path)
                return UploadResult(str(path), key, "skipped")
            logger.error("File not found: %s", path)
            return UploadResult(str(path), key, "error", error="File not found")

        body = path.read_bytes()
        try:
            overwritten = self._exists(key)
            if overwritten:
                logger.info("%s already exists in %s; overwriting", key, self.bucket)
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                CacheControl=cache_control(self.version),
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Upload of %s failed: %s", key, exc)
            return UploadResult(str(path), key, "error", size_bytes=len(body), error=str(exc))

        result = UploadResult(
            str(path),
            key,
            "uploaded",
            size_bytes=len(body),
            overwritten=overwritten,
            cdn_url=cdn_url(self.settings.CDN_BASE_URL, key),
        )
        logger.info(
            "Uploaded %s (%.2f MB)%s",
            key,
            len(body) / (1024 * 1024),
            f" -> {result.cdn_url}" if result.cdn_url else "",
        )
        return result
