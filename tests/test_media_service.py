"""
StayPlaces API: Media Service Unit Tests (Mocked Media Host)
=============================================================

What:  Tests for MediaService validation and Cloudinary uploader calls.
How:   cloudinary.uploader.upload is patched; no network access.

What we test:
    ✅ No images → no upload call
    ✅ One uploader call per file with folder and credentials, URLs in order
    ✅ Rejected files never reach the media host
    ✅ SDK errors and URL-less replies → MediaUploadError
    ✅ Missing credentials → MediaUploadError
"""

from unittest.mock import patch

import cloudinary.exceptions
import pytest

from stayplaces.config import settings
from stayplaces.exceptions import MediaUploadError, ValidationError
from stayplaces.services.media_service import MediaService


def service_with(**overrides):
    params = {
        "cloud_name": "demo",
        "api_key": "key-123",
        "api_secret": "secret-456",
        "folder": "test-folder",
    }
    params.update(overrides)
    return MediaService(**params)


class TestUpload:
    """Tests for successful uploads through the Cloudinary SDK."""

    @pytest.mark.asyncio
    async def test_no_images_makes_no_request(self, media, media_requests):
        """An empty batch returns [] without calling the uploader."""
        assert await media.upload_images([]) == []
        assert media_requests == []

    @pytest.mark.asyncio
    async def test_uploads_return_urls_in_order(self, media, media_requests, sample_image_bytes):
        """URLs come back in the same order the files were given."""
        urls = await media.upload_images([
            ("front.jpg", sample_image_bytes, "image/jpeg"),
            ("garden.png", sample_image_bytes, "image/png"),
        ])

        assert len(media_requests) == 2
        assert urls[0].endswith("/1.jpg")
        assert urls[1].endswith("/2.jpg")

    @pytest.mark.asyncio
    async def test_uploader_receives_file_and_options(self, media, media_requests, sample_image_bytes):
        """Each call carries the file bytes, folder and per-call credentials."""
        await media.upload_images([("front.jpg", sample_image_bytes, "image/jpeg")])

        call = media_requests[0]
        assert call["content"] == sample_image_bytes
        assert call["filename"] == "front.jpg"
        assert call["folder"] == "test-folder"
        assert call["resource_type"] == "image"
        assert call["cloud_name"] == "demo"
        assert call["api_key"] == "key-123"
        assert call["api_secret"] == "secret-456"
        assert call["timeout"] == settings.media_timeout

    @pytest.mark.asyncio
    async def test_falls_back_to_plain_url(self, sample_image_bytes):
        """A reply without secure_url uses url instead."""
        media = service_with()
        with patch("cloudinary.uploader.upload", return_value={"url": "http://cdn/x.jpg"}):
            assert await media.upload_images([("a.jpg", sample_image_bytes, None)]) == ["http://cdn/x.jpg"]


class TestUploadFailures:
    """Tests for media host failures mapping to MediaUploadError."""

    @pytest.mark.asyncio
    async def test_sdk_error(self, sample_image_bytes):
        """A Cloudinary SDK error becomes MediaUploadError."""
        media = service_with()
        with patch(
            "cloudinary.uploader.upload",
            side_effect=cloudinary.exceptions.AuthorizationRequired("Invalid Signature"),
        ):
            with pytest.raises(MediaUploadError) as exc_info:
                await media.upload_images([("a.jpg", sample_image_bytes, "image/jpeg")])
        assert exc_info.value.context["filename"] == "a.jpg"
        assert "Invalid Signature" in exc_info.value.context["error"]

    @pytest.mark.asyncio
    async def test_failure_stops_the_batch(self, sample_image_bytes):
        """Files after a failed upload are not sent."""
        media = service_with()
        with patch(
            "cloudinary.uploader.upload",
            side_effect=cloudinary.exceptions.GeneralError("timed out"),
        ) as upload:
            with pytest.raises(MediaUploadError):
                await media.upload_images([
                    ("a.jpg", sample_image_bytes, "image/jpeg"),
                    ("b.jpg", sample_image_bytes, "image/jpeg"),
                ])
        assert upload.call_count == 1

    @pytest.mark.asyncio
    async def test_reply_without_url(self, sample_image_bytes):
        """A reply with neither secure_url nor url is a failure."""
        media = service_with()
        with patch("cloudinary.uploader.upload", return_value={"public_id": "abc"}):
            with pytest.raises(MediaUploadError):
                await media.upload_images([("a.jpg", sample_image_bytes, "image/jpeg")])

    @pytest.mark.asyncio
    async def test_not_configured(self, sample_image_bytes):
        """Missing credentials fail before the uploader is called."""
        media = service_with(api_secret="")
        assert media.is_configured is False
        with patch("cloudinary.uploader.upload") as upload:
            with pytest.raises(MediaUploadError, match="not configured"):
                await media.upload_images([("a.jpg", sample_image_bytes, "image/jpeg")])
        upload.assert_not_called()


class TestImageValidation:
    """Tests for per-file and per-batch validation."""

    @pytest.mark.parametrize("filename", ["notes.pdf", "script.exe", "noextension"])
    @pytest.mark.asyncio
    async def test_rejected_extension_is_not_uploaded(self, media, media_requests, filename):
        """Non-image extensions are rejected before any upload."""
        with pytest.raises(ValidationError, match="not supported"):
            await media.upload_images([(filename, b"data", None)])
        assert media_requests == []

    def test_extension_is_case_insensitive(self, media):
        """Extension check ignores case and returns it lowercased."""
        assert media.validate_extension("PHOTO.JPG") == ".jpg"
        assert media.validate_extension("pic.WebP") == ".webp"

    def test_non_image_content_type(self, media):
        """A declared non-image content type is rejected."""
        with pytest.raises(ValidationError, match="not an image"):
            media.validate_content_type("a.jpg", "application/pdf")

    def test_missing_content_type_is_allowed(self, media):
        """No declared content type leaves the extension check in charge."""
        media.validate_content_type("a.jpg", None)

    def test_empty_file(self, media):
        """Zero-byte files are rejected."""
        with pytest.raises(ValidationError, match="empty"):
            media.validate_size("a.jpg", 0)

    def test_oversized_file(self, media):
        """Files over max_file_size are rejected."""
        with pytest.raises(ValidationError, match="exceeds maximum"):
            media.validate_size("a.jpg", settings.max_file_size + 1)

    @pytest.mark.asyncio
    async def test_too_many_images(self, media, media_requests, sample_image_bytes):
        """More than max_images_per_place files are rejected as a batch."""
        images = [(f"{n}.jpg", sample_image_bytes, "image/jpeg") for n in range(3)]
        with patch.object(settings, "max_images_per_place", 2):
            with pytest.raises(ValidationError, match="Too many images"):
                await media.upload_images(images)
        assert media_requests == []

    @pytest.mark.asyncio
    async def test_one_bad_file_blocks_whole_batch(self, media, media_requests, sample_image_bytes):
        """One invalid file means nothing in the batch is uploaded."""
        images = [
            ("good.jpg", sample_image_bytes, "image/jpeg"),
            ("bad.txt", b"hello", "text/plain"),
        ]
        with pytest.raises(ValidationError):
            await media.upload_images(images)
        assert media_requests == []
