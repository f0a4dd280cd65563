"""Configuration data models."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogConfig(BaseModel):
    """Catalog and import directory configuration."""

    media_dir: Path = Field(..., description="Root directory of the media catalog")
    import_dir: Optional[Path] = Field(
        default=None, description="Directory holding raw disk backups to import"
    )
    persist_size_cache: bool = Field(
        default=True, description="Store computed disk sizes in sizes.json per entry"
    )
    staging_prefix: str = Field(
        default=".staging-", description="Name prefix for in-flight relocations"
    )

    @field_validator("media_dir", "import_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Optional[str]) -> Optional[str]:
        """Expand environment variables and ``~`` in paths."""
        if v is None or v == "":
            return None
        expanded = os.path.expandvars(str(v))
        # Unresolved ${VAR} placeholders mean the path is not configured
        if expanded.startswith("$"):
            return None
        return os.path.expanduser(expanded)

    @field_validator("media_dir")
    @classmethod
    def validate_media_dir(cls, v: Optional[Path]) -> Path:
        """Validate that the catalog root is a directory."""
        if v is None:
            raise ValueError("media_dir is required")
        if not v.is_dir():
            raise ValueError(f"media_dir is not a directory: {v}")
        return v

    @field_validator("import_dir")
    @classmethod
    def validate_import_dir(cls, v: Optional[Path]) -> Optional[Path]:
        """Validate that the import root, if set, is a directory."""
        if v is not None and not v.is_dir():
            raise ValueError(f"import_dir is not a directory: {v}")
        return v

    @field_validator("staging_prefix")
    @classmethod
    def validate_staging_prefix(cls, v: str) -> str:
        """Staging directories must stay hidden from catalog scans."""
        if not v.startswith("."):
            raise ValueError("staging_prefix must start with '.'")
        return v


class TMDbConfig(BaseModel):
    """TMDb API configuration."""

    api_key: str = Field(default="", description="TMDb API key")
    base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDb API base URL")
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/original", description="TMDb image base URL"
    )
    language: str = Field(default="en-US", description="Default language for requests")
    timeout: int = Field(default=10, gt=0, description="Request timeout in seconds")
    retry_attempts: int = Field(default=3, ge=1, description="Attempts for transient failures")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        v = os.path.expandvars(v)
        # Unresolved ${VAR} placeholders mean no key
        return "" if v.startswith("$") else v

    @property
    def enabled(self) -> bool:
        """Whether the TMDb integration can be used."""
        return bool(self.api_key)


class PlaybackConfig(BaseModel):
    """Playback command configuration."""

    url_prefix: str = Field(
        default="", description="Prefix prepended to disk paths in player commands"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file: Optional[str] = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, gt=0, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Logging level must be one of: {allowed}")
        return v.upper()


class Config(BaseModel):
    """Main configuration model."""

    catalog: CatalogConfig = Field(..., description="Catalog configuration")
    tmdb: TMDbConfig = Field(default_factory=TMDbConfig, description="TMDb configuration")
    playback: PlaybackConfig = Field(
        default_factory=PlaybackConfig, description="Playback command configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )
