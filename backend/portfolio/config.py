"""
Application configuration using Pydantic Settings.

All environment variables are accessed through this config object.
Never use os.getenv() directly in business logic.
"""

from typing import List, Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Maximum accepted image size: 10MB
DEFAULT_MAX_UPLOAD_SIZE = 10 * 1024 * 1024

DEFAULT_ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Storage backend selection
    STORAGE_BACKEND: Literal["local", "remote"] = Field(
        default="local",
        description="Asset store used for uploads: 'local' disk or 'remote' Cloudinary",
    )

    # Cloudinary Configuration
    CLOUDINARY_CLOUD_NAME: str = Field(
        default="",
        description="Cloudinary cloud name",
    )
    CLOUDINARY_API_KEY: str = Field(
        default="",
        description="Cloudinary API key",
    )
    CLOUDINARY_API_SECRET: str = Field(
        default="",
        description="Cloudinary API secret used to sign requests",
    )
    CLOUDINARY_FOLDER: str = Field(
        default="portfolio/projects",
        description="Cloudinary folder that receives uploads",
    )
    CLOUDINARY_TIMEOUT: float = Field(
        default=30.0,
        description="Timeout in seconds for Cloudinary API calls",
    )

    # Local Storage Configuration
    PUBLIC_BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Base public URL for locally served assets",
    )
    LOCAL_STORAGE_ROOT: str = Field(
        default="uploads",
        description="Directory holding locally stored images",
    )
    LOCAL_PUBLIC_PREFIX: str = Field(
        default="uploads",
        description="URL path prefix the local image directory is served under",
    )
    STAGING_PATH: str = Field(
        default="/tmp/portfolio-staging",
        description="Scratch directory for staged uploads",
    )
    STORAGE_PATH: str = Field(
        default="data",
        description="Directory holding project documents",
    )

    # Upload Policy
    MAX_UPLOAD_SIZE: int = Field(
        default=DEFAULT_MAX_UPLOAD_SIZE,
        description="Maximum file upload size in bytes (10MB)",
    )
    ALLOWED_MIME_TYPES: List[str] = Field(
        default=DEFAULT_ALLOWED_MIME_TYPES,
        description="MIME types accepted for image uploads",
    )
    MAX_BATCH_FILES: int = Field(
        default=10,
        description="Maximum number of files in one multi-file upload",
    )
    THUMBNAIL_SIZE: int = Field(
        default=200,
        description="Edge length in pixels of square thumbnails",
    )
    MAX_IMAGE_WIDTH: int = Field(
        default=1200,
        description="Stored images are shrunk to fit this width",
    )
    MAX_IMAGE_HEIGHT: int = Field(
        default=800,
        description="Stored images are shrunk to fit this height",
    )
    IMAGE_QUALITY: int = Field(
        default=85,
        ge=1,
        le=100,
        description="JPEG/WebP quality used when a stored image is resized",
    )

    # Cleanup Configuration
    CLEANUP_ENABLED: bool = Field(
        default=False,
        description="Run the periodic sweep of expired assets",
    )
    CLEANUP_INTERVAL_HOURS: int = Field(
        default=24,
        description="Hours between sweeps",
    )
    ASSET_TTL_DAYS: int = Field(
        default=30,
        description="Assets older than this many days are swept",
    )

    # Application Configuration
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="CORS allowed origins",
    )
    DEBUG: bool = Field(
        default=False,
        description="Include exception messages in 500 responses",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level",
    )

    @model_validator(mode="after")
    def check_remote_credentials(self) -> "Settings":
        """Fail at startup when the remote backend lacks credentials."""
        if self.STORAGE_BACKEND == "remote":
            missing = [
                name
                for name in (
                    "CLOUDINARY_CLOUD_NAME",
                    "CLOUDINARY_API_KEY",
                    "CLOUDINARY_API_SECRET",
                )
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    "STORAGE_BACKEND=remote requires Cloudinary credentials; "
                    f"missing: {', '.join(missing)}"
                )
        return self


# Global settings instance
settings = Settings()
