# src/aliaslookup/config/settings.py — v1
"""Typed configuration loaded from .env and the environment via pydantic-settings.

Single source of truth for deployment-specific settings. The data and
cache directories also honour the variables the launcher exports to
workflows (``alfred_workflow_data`` and ``alfred_workflow_cache``).
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === Storage locations ===
    data_dir: Path = Field(
        default=Path("~/.aliaslookup/data"),
        validation_alias=AliasChoices("alfred_workflow_data", "data_dir"),
    )
    cache_dir: Path = Field(
        default=Path("~/.aliaslookup/cache"),
        validation_alias=AliasChoices("alfred_workflow_cache", "cache_dir"),
    )
    cache_backend: Literal["file", "sqlite"] = "file"

    # === Remote sources ===
    links_url: str = "http://go/.export"
    keys_url: str = "https://git.io/heilek"

    # === Freshness ===
    links_max_age: timedelta = timedelta(seconds=5)
    keys_max_age: timedelta = timedelta(hours=24)
    icon_retry_cooldown: timedelta = timedelta(hours=24)
    rerun_delay: float = 0.2

    # === Background jobs ===
    launch_grace_period: timedelta = timedelta(seconds=10)

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "1MB"
    log_retention: int = 3

    # --- Validators ---

    @field_validator("rerun_delay")
    @classmethod
    def validate_rerun_delay(cls, v: float) -> float:
        # the launcher accepts 0.1 to 5.0 seconds
        if not 0.1 <= v <= 5.0:
            raise ValueError("rerun_delay must be between 0.1 and 5.0 seconds")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        for name in ("links_max_age", "keys_max_age", "icon_retry_cooldown"):
            if getattr(self, name) <= timedelta(0):
                errors.append(f"{name.upper()} must be positive")

        if self.data_dir.expanduser() == self.cache_dir.expanduser():
            errors.append("DATA_DIR and CACHE_DIR must differ")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def data_path(self) -> Path:
        return self.data_dir.expanduser()

    @property
    def cache_path(self) -> Path:
        return self.cache_dir.expanduser()

    @property
    def icons_path(self) -> Path:
        """Directory holding downloaded link icons."""
        return self.cache_path / "icons"

    @property
    def jobs_path(self) -> Path:
        """Directory holding background job pid files."""
        return self.cache_path / "jobs"


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
