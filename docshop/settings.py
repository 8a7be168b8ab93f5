"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docshop.exceptions import SettingsError


class Settings(BaseSettings):
    """Service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "docshop"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    host: str = Field(default="0.0.0.0", validation_alias="HOST", description="Bind address.")  # noqa: S104
    port: int = Field(default=5000, ge=1, le=65535, validation_alias="PORT", description="Listen port.")
    cors_origins: str = Field(
        default="*",
        validation_alias="CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )
    temp_dir: str | None = Field(
        default=None,
        validation_alias="TEMP_DIR",
        description="Directory for ephemeral request files. Defaults to the system temp dir.",
    )
    max_upload_mb: int = Field(
        default=50,
        ge=1,
        validation_alias="MAX_UPLOAD_MB",
        description="Maximum request body size in megabytes.",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def cors_origin_list(self) -> list[str]:
        """Return configured CORS origins as a list."""
        origins = [origin.strip() for origin in self.cors_origins.split(",")]
        return [origin for origin in origins if origin] or ["*"]

    @property
    def temp_root(self) -> Path:
        """Return the directory that request workspaces live in."""
        return Path(self.temp_dir) if self.temp_dir else Path(tempfile.gettempdir())

    @property
    def max_content_length(self) -> int:
        """Return the upload limit in bytes."""
        return self.max_upload_mb * 1024 * 1024


def get_settings() -> Settings:
    """Return a freshly loaded settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        raise SettingsError(exc=exc) from exc
