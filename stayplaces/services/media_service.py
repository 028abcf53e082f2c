"""
StayPlaces API: Media Host Service (Cloudinary)
================================================

What:  Validates uploaded place images and forwards them to Cloudinary.
How:   Checks extension, declared content type and size, then hands each
       file to the Cloudinary SDK uploader and returns its public URL.
Who:   Called by PlaceService while creating a place.
When:  After the place payload has passed validation, before the store
       is read or written.

Upload contract:
    cloudinary.uploader.upload(file, folder=<folder>, resource_type="image", ...)
    → {"secure_url": "https://res.cloudinary.com/...", "url": "http://...", ...}

The SDK is blocking, so each call runs in Starlette's threadpool.
Nothing is written to local disk; the images only live on the media host.
"""

import io
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import cloudinary.exceptions
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from stayplaces.config import settings
from stayplaces.exceptions import MediaUploadError, ValidationError

logger = logging.getLogger(__name__)

# (filename, content, declared content type)
ImageUpload = Tuple[str, bytes, Optional[str]]

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


class MediaService:
    """
    Proxies image uploads to the configured media host.

    Lifecycle of one create request's images:
        1. PlaceService hands over every file from the multipart body
        2. All files are validated first (count, extension, type, size)
        3. Files are uploaded one at a time, in request order
        4. The public URLs come back in the same order
        5. Any failure aborts the whole batch with MediaUploadError
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: Optional[str] = None,
    ):
        """
        Args:
            cloud_name/api_key/api_secret/folder: Override settings (used in tests).
        """
        self.cloud_name = cloud_name if cloud_name is not None else settings.cloudinary_cloud_name
        self.api_key = api_key if api_key is not None else settings.cloudinary_api_key
        self.api_secret = api_secret if api_secret is not None else settings.cloudinary_api_secret
        self.folder = folder if folder is not None else settings.media_folder

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload_options(self) -> Dict[str, Any]:
        """Per-call SDK options; credentials travel with each call, not the global config."""
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "folder": self.folder,
            "resource_type": "image",
            "timeout": settings.media_timeout,
        }

    # ── Validation ────────────────────────────────────────────────────────

    def validate_extension(self, filename: str) -> str:
        """
        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if the extension is not an image extension.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="images",
                context={"filename": filename, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_content_type(self, filename: str, content_type: Optional[str]) -> None:
        """Rejects files whose declared content type is present and not image/*."""
        if content_type and not content_type.lower().startswith("image/"):
            raise ValidationError(
                message=f"File '{filename}' is not an image (content type '{content_type}').",
                field="images",
                context={"filename": filename, "content_type": content_type},
            )

    def validate_size(self, filename: str, size: int) -> None:
        """Rejects empty files and files over settings.max_file_size."""
        if size == 0:
            raise ValidationError(
                message=f"File '{filename}' is empty.",
                field="images",
                context={"filename": filename},
            )
        if size > settings.max_file_size:
            max_mb = settings.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=(
                    f"File '{filename}' ({size / (1024 * 1024):.1f}MB) "
                    f"exceeds maximum of {max_mb:.0f}MB."
                ),
                field="images",
                context={"filename": filename, "actual_size": size, "max_size_mb": max_mb},
            )

    def validate_images(self, images: Sequence[ImageUpload]) -> None:
        """Validate the whole batch before anything is sent upstream."""
        if len(images) > settings.max_images_per_place:
            raise ValidationError(
                message=(
                    f"Too many images ({len(images)}). "
                    f"At most {settings.max_images_per_place} are allowed per place."
                ),
                field="images",
                context={"count": len(images), "max": settings.max_images_per_place},
            )
        for filename, content, content_type in images:
            self.validate_extension(filename)
            self.validate_content_type(filename, content_type)
            self.validate_size(filename, len(content))

    # ── Upload ────────────────────────────────────────────────────────────

    async def _upload_one(self, image: ImageUpload) -> str:
        filename, content, _ = image
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                io.BytesIO(content),
                filename=filename,
                **self.upload_options(),
            )
        except cloudinary.exceptions.Error as e:
            logger.error("Media host rejected %s: %s", filename, str(e))
            raise MediaUploadError(context={"filename": filename, "error": str(e)})

        url = None
        if isinstance(result, dict):
            url = result.get("secure_url") or result.get("url")
        if not url:
            logger.error("Media host reply for %s has no URL", filename)
            raise MediaUploadError(context={"filename": filename, "reply": str(result)[:200]})

        logger.info("Image uploaded: %s → %s", filename, url)
        return url

    async def upload_images(self, images: Sequence[ImageUpload]) -> List[str]:
        """
        Validate and upload every image, returning public URLs in order.

        Returns:
            [] when images is empty (the media host is not contacted).

        Raises:
            ValidationError for a rejected file (nothing is uploaded).
            MediaUploadError when the host is not configured or fails.
        """
        if not images:
            return []

        self.validate_images(images)

        if not self.is_configured:
            raise MediaUploadError(
                message="Image uploads are not available: the media host is not configured.",
                context={"cloud_name": self.cloud_name or None},
            )

        urls = []
        for image in images:
            urls.append(await self._upload_one(image))
        return urls


# ── Singleton Instance ────────────────────────────────────────────────────
media_service = MediaService()
