# src/config/settings.py — v1
"""Typed configuration loaded from the environment / .env via pydantic-settings.

Single source of truth for host-specific settings: which mirroring tool to
drive, where its binary lives, the default numeric options and where the
log and JSON summary files are written.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mirrorbatch.core.errors import ConfigurationError
from mirrorbatch.core.models import (
    MAX_CONCURRENCY_LIMIT,
    MAX_INTERNAL_THREADS,
    MIN_CONCURRENCY_LIMIT,
    MIN_INTERNAL_THREADS,
    ToolFlavor,
)

DEFAULT_LOG_FILENAME = "mirrorbatch.log"
DEFAULT_JSON_FILENAME = "mirrorbatch-summary.json"


def host_is_windows() -> bool:
    return os.name == "nt"


def script_dir() -> Path:
    """Directory of the invoked script, where log and summary files live."""
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if not argv0 or argv0 in {"-c", "-m"}:
        return Path.cwd()
    return Path(argv0).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from MIRRORBATCH_* variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="MIRRORBATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Wrapped tool ===
    tool: Literal["auto", "rsync", "robocopy"] = "auto"
    rsync_binary: str = "rsync"
    robocopy_binary: str = "robocopy"

    # === Defaults for numeric CLI options ===
    default_internal_threads: int = 16
    default_concurrency_limit: int = 4

    # === Retry policy handed to the tool ===
    retry_count: int = 2
    retry_wait_seconds: int = 2

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None

    # === Summary export ===
    json_file: Path | None = None

    # --- Validators ---

    @field_validator("default_internal_threads")
    @classmethod
    def validate_internal_threads(cls, v: int) -> int:
        if not MIN_INTERNAL_THREADS <= v <= MAX_INTERNAL_THREADS:
            raise ValueError(
                f"default_internal_threads must be between "
                f"{MIN_INTERNAL_THREADS} and {MAX_INTERNAL_THREADS}"
            )
        return v

    @field_validator("default_concurrency_limit")
    @classmethod
    def validate_concurrency_limit(cls, v: int) -> int:
        if not MIN_CONCURRENCY_LIMIT <= v <= MAX_CONCURRENCY_LIMIT:
            raise ValueError(
                f"default_concurrency_limit must be between "
                f"{MIN_CONCURRENCY_LIMIT} and {MAX_CONCURRENCY_LIMIT}"
            )
        return v

    @field_validator("retry_count", "retry_wait_seconds")
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.tool == "rsync" and not self.rsync_binary.strip():
            errors.append("RSYNC_BINARY must be set when TOOL is rsync")
        if self.tool == "robocopy" and not self.robocopy_binary.strip():
            errors.append("ROBOCOPY_BINARY must be set when TOOL is robocopy")

        if (
            self.log_file is not None
            and self.json_file is not None
            and self.log_file.expanduser() == self.json_file.expanduser()
        ):
            errors.append("LOG_FILE and JSON_FILE must point to different files")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def tool_flavor(self) -> ToolFlavor:
        """Resolve ``auto`` against the host platform."""
        if self.tool == "auto":
            return ToolFlavor.ROBOCOPY if host_is_windows() else ToolFlavor.RSYNC
        return ToolFlavor(self.tool)

    @property
    def resolved_log_file(self) -> Path:
        if self.log_file is not None:
            return self.log_file.expanduser()
        return script_dir() / DEFAULT_LOG_FILENAME

    @property
    def resolved_json_file(self) -> Path:
        if self.json_file is not None:
            return self.json_file.expanduser()
        return script_dir() / DEFAULT_JSON_FILENAME


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
