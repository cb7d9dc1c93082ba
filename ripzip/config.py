"""Configuration management with Pydantic settings."""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ripzip.app.archive_builder import DEFAULT_MAX_DEPTH, ArchiveOptions
from ripzip.utils.sizes import parse_size


class Settings(BaseSettings):
    """ripzip configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="RIPZIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    verbose: bool = Field(
        default=False,
        description="Print a progress line for every file added",
    )

    zip64: bool = Field(
        default=False,
        description="Write ZIP64 extensions for every member (files or archives over 4 GiB)",
    )

    # Size limits
    size_capped: bool = Field(
        default=False,
        description="Apply the default per-file and total size caps",
    )

    max_file_size: int | None = Field(
        default=None,
        ge=0,
        description="Skip files larger than this many bytes (accepts 10K, 5M, 2G)",
    )

    max_total_size: int | None = Field(
        default=None,
        ge=0,
        description="Abort when the archived total exceeds this many bytes",
    )

    # Traversal
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        description="Deepest directory level descended into",
    )

    same_file_system: bool = Field(
        default=True,
        description="Do not cross filesystem/mount boundaries while walking",
    )

    # Output
    output_dir: Path | None = Field(
        default=None,
        description="Write archives here instead of next to each source directory",
    )

    keep_partial: bool = Field(
        default=False,
        description="Keep the incomplete archive when a build fails",
    )

    @field_validator("max_file_size", "max_total_size", mode="before")
    @classmethod
    def _parse_size(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, (str, int)):
            return parse_size(value)
        return value

    def archive_options(self) -> ArchiveOptions:
        """Build the per-archive options described by these settings.

        Explicit limits win over the size-capped defaults.
        """
        values: dict[str, object] = {
            "verbose": self.verbose,
            "allow_zip64": self.zip64,
            "max_depth": self.max_depth,
            "same_file_system": self.same_file_system,
        }
        if self.max_file_size is not None:
            values["max_file_size"] = self.max_file_size
        if self.max_total_size is not None:
            values["max_total_size"] = self.max_total_size
        if self.size_capped:
            return ArchiveOptions.size_capped(**values)
        return ArchiveOptions.model_validate(values)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
