"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables with sensible defaults.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BackendType = Literal["memory", "local", "s3"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DEPOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(default="Depot", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="production", description="Environment"
    )

    # -------------------------------------------------------------------------
    # URLs
    # -------------------------------------------------------------------------
    host: str | None = Field(
        default=None, description="Default host for generated file URLs"
    )
    mount_point: str | None = Field(
        default="attachments", description="Default path prefix for file URLs"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------
    secret_key: str = Field(
        ..., min_length=16, description="Secret key for signing file URLs"
    )
    signing_digest: str = Field(
        default="sha1", description="hashlib digest used for URL tokens"
    )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    cache_backend: BackendType = Field(
        default="memory", description="Backend type registered as 'cache'"
    )
    store_backend: BackendType = Field(
        default="local", description="Backend type registered as 'store'"
    )
    local_storage_path: str = Field(
        default="/tmp/depot", description="Local storage root directory"
    )

    # S3/MinIO settings
    s3_endpoint_url: str | None = Field(
        default=None, description="S3 endpoint URL (for MinIO)"
    )
    s3_access_key: str | None = Field(default=None, description="S3 access key")
    s3_secret_key: str | None = Field(default=None, description="S3 secret key")
    s3_bucket_name: str = Field(default="depot-files", description="S3 bucket name")
    s3_region: str = Field(default="eu-west-1", description="S3 region")

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="json", description="Log format"
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("host", mode="before")
    @classmethod
    def strip_host(cls, v: str | None) -> str | None:
        """Drop trailing slashes so paths can be appended cleanly."""
        if v:
            v = v.rstrip("/")
        return v or None

    @field_validator("mount_point", mode="before")
    @classmethod
    def strip_mount_point(cls, v: str | None) -> str | None:
        """Normalize the mount point to a bare path segment."""
        if v is not None:
            v = v.strip("/")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
