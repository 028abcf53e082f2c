"""
StayPlaces API: Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; checked again during app startup.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for local development except the
    Cloudinary credentials, which are needed only when images are uploaded.

    Attributes are grouped by concern for readability.
    """

    # ── Places Store ──────────────────────────────────────────────────────
    # What: Path of the JSON document holding the array of places
    # Relative paths resolve against the process working directory
    places_file: str = Field(
        default="./data/places.json",
        description="JSON file holding every place record",
    )

    # What: Create an empty `[]` document at startup when the file is missing
    # With this off, a missing file surfaces as a storage error on first request
    create_places_file: bool = Field(default=True)

    # ── Media Host (Cloudinary) ───────────────────────────────────────────
    # What: Credentials passed to the Cloudinary SDK on each upload
    # How to obtain: Cloudinary console → Dashboard → API Keys
    cloudinary_cloud_name: str = Field(default="")
    cloudinary_api_key: str = Field(default="")
    cloudinary_api_secret: str = Field(default="")

    # What: Folder (namespace) uploaded images are placed under
    media_folder: str = Field(default="stayplaces/places")

    # What: Seconds to wait on the media host before giving up on an upload
    media_timeout: float = Field(default=30.0, gt=0, le=300)

    # ── Uploads ───────────────────────────────────────────────────────────
    # What: Maximum allowed size of one image, in bytes
    # Default: 10MB = 10 * 1024 * 1024 = 10485760
    # Valid range: 1MB to 50MB
    max_file_size: int = Field(default=10_485_760, ge=1_048_576, le=52_428_800)

    # What: Maximum number of images accepted in one create request
    max_images_per_place: int = Field(default=10, ge=1, le=50)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def media_configured(self) -> bool:
        """True when every Cloudinary credential is present."""
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PLACES_FILE and places_file both work
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the media host credentials are configured.
        When:  Called during app startup (lifespan).
        How:   Collects one message per missing credential and raises ValueError.
        """
        errors = []
        if not self.cloudinary_cloud_name:
            errors.append("CLOUDINARY_CLOUD_NAME is not set.")
        if not self.cloudinary_api_key:
            errors.append("CLOUDINARY_API_KEY is not set.")
        if not self.cloudinary_api_secret:
            errors.append("CLOUDINARY_API_SECRET is not set.")
        if errors:
            raise ValueError(
                "Configuration validation failed (image uploads will be rejected):\n"
                + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
