"""Unit tests for the R2 asset uploader, using a stubbed S3 client."""

import boto3
import pytest
from botocore.stub import ANY, Stubber
from libs.common.config import Settings
from services.media_service.storage import (
    DEFAULT_CACHE_CONTROL,
    VERSIONED_CACHE_CONTROL,
    R2Uploader,
    cache_control,
    cdn_url,
    versioned_key,
)

ENDPOINT = "https://acct.r2.cloudflarestorage.com"


def _settings(**values) -> Settings:
    defaults = {
        "R2_ACCOUNT_ID": "acct",
        "R2_ACCESS_KEY_ID": "key",
        "R2_SECRET_ACCESS_KEY": "secret",
        "R2_BUCKET": "assets",
        "R2_ENDPOINT": ENDPOINT,
        "CDN_BASE_URL": "https://cdn.vortex.test/",
        "VERSION": "3",
    }
    defaults.update(values)
    return Settings(_env_file=None, **defaults)


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        endpoint_url=ENDPOINT,
        aws_access_key_id="key",
        aws_secret_access_key="secret",
        region_name="auto",
    )


@pytest.fixture
def video(tmp_path):
    path = tmp_path / "hero.mp4"
    path.write_bytes(b"\x00" * 2048)
    return path


@pytest.mark.unit
class TestKeyHelpers:
    def test_versioned_key(self):
        assert versioned_key("videos/hero.mp4", "3") == "videos/hero.v3.mp4"
        assert versioned_key("videos/hero.mp4", None) == "videos/hero.mp4"

    def test_cache_control(self):
        assert cache_control("3") == VERSIONED_CACHE_CONTROL
        assert cache_control(None) == DEFAULT_CACHE_CONTROL

    def test_cdn_url(self):
        assert cdn_url("https://cdn.test/", "/videos/a.mp4") == "https://cdn.test/videos/a.mp4"
        assert cdn_url(None, "videos/a.mp4") is None


@pytest.mark.unit
class TestR2Uploader:
    def test_requires_settings_without_client(self):
        settings = _settings(R2_BUCKET=None, R2_ENDPOINT=None)
        with pytest.raises(ValueError, match="R2_BUCKET, R2_ENDPOINT"):
            R2Uploader(settings=settings)

    def test_uploads_new_object(self, s3_client, video):
        key = "videos/hero.v3.mp4"
        with Stubber(s3_client) as stubber:
            stubber.add_client_error(
                "head_object",
                service_error_code="404",
                http_status_code=404,
                expected_params={"Bucket": "assets", "Key": key},
            )
            stubber.add_response(
                "put_object",
                {},
                {
                    "Bucket": "assets",
                    "Key": key,
                    "Body": ANY,
                    "ContentType": "video/mp4",
                    "CacheControl": VERSIONED_CACHE_CONTROL,
                },
            )
            result = R2Uploader(settings=_settings(), client=s3_client).upload(
                video, "videos/hero.mp4", "video/mp4"
            )
            stubber.assert_no_pending_responses()

        assert result.status == "uploaded"
        assert result.remote_key == key
        assert result.size_bytes == 2048
        assert result.overwritten is False
        assert result.cdn_url == "https://cdn.vortex.test/videos/hero.v3.mp4"

    def test_overwrite_is_reported(self, s3_client, video):
        with Stubber(s3_client) as stubber:
            stubber.add_response("head_object", {"ContentLength": 2048})
            stubber.add_response("put_object", {})
            result = R2Uploader(
                settings=_settings(VERSION=None), client=s3_client
            ).upload(video, "videos/hero.mp4", "video/mp4")

        assert result.status == "uploaded"
        assert result.remote_key == "videos/hero.mp4"
        assert result.overwritten is True

    def test_missing_optional_file_is_skipped(self, s3_client, tmp_path):
        uploader = R2Uploader(settings=_settings(), client=s3_client)
        result = uploader.upload(tmp_path / "poster.jpg", "images/poster.jpg", "image/jpeg", optional=True)
        assert result.status == "skipped"

    def test_missing_required_file_is_an_error(self, s3_client, tmp_path):
        uploader = R2Uploader(settings=_settings(), client=s3_client)
        result = uploader.upload(tmp_path / "hero.mp4", "videos/hero.mp4", "video/mp4")
        assert result.status == "error"
        assert result.error == "File not found"

    def test_request_failure_is_an_error(self, s3_client, video):
        with Stubber(s3_client) as stubber:
            stubber.add_client_error(
                "head_object", service_error_code="AccessDenied", http_status_code=403
            )
            result = R2Uploader(settings=_settings(), client=s3_client).upload(
                video, "videos/hero.mp4", "video/mp4"
            )

        assert result.status == "error"
        assert "AccessDenied" in result.error
