# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

Every model that crosses a worker boundary is frozen: jobs receive these
snapshots by value and can never mutate driver state through them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from mirrorbatch.core.errors import ConfigurationError, InvalidArgumentsError

MIN_CONCURRENCY_LIMIT = 1
MAX_CONCURRENCY_LIMIT = 32
MIN_INTERNAL_THREADS = 1
MAX_INTERNAL_THREADS = 128


# === ENUMERATIONS ===


class ToolFlavor(str, Enum):
    """Which external mirroring engine a run delegates to."""

    RSYNC = "rsync"
    ROBOCOPY = "robocopy"


class Mode(str, Enum):
    """Effective copy mode of one run."""

    MIRROR = "mirror"
    DRY_RUN = "dry_run"
    VALIDATE = "validate"

    @property
    def list_only(self) -> bool:
        return self is not Mode.MIRROR


class Bucket(str, Enum):
    """Coarse classification of a raw tool exit code."""

    SUCCESS = "success"
    CHANGED = "changed"
    WARNING = "warning"
    FAILED = "failed"


class ExitStatus(IntEnum):
    """Process exit status returned to the invoking environment."""

    SUCCESS = 0
    FATAL = 1
    PARTIAL = 2
    FAILURE = 4
    INTERRUPTED = 130


class DriverState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


def resolve_mode(dry_run: bool = False, validate: bool = False) -> Mode:
    """Collapse the dry-run/validate flags into one mode. Dry run wins."""
    if dry_run:
        return Mode.DRY_RUN
    if validate:
        return Mode.VALIDATE
    return Mode.MIRROR


# === REQUEST ===


class BackupRequest(BaseModel):
    """Immutable input to one invocation."""

    model_config = {"frozen": True}

    sources: tuple[str, ...]
    destination: str
    mode: Mode = Mode.MIRROR
    delete_extra: bool = True
    parallel: bool = False
    concurrency_limit: int = 4
    fail_fast: bool = False
    internal_threads: int = 16
    log_file: Path | None = None

    @model_validator(mode="after")
    def validate_request(self) -> BackupRequest:
        """Reject empty path lists and out-of-range numeric options without clamping."""
        if not self.sources:
            raise InvalidArgumentsError("At least one source folder is required")
        if any(not s.strip() for s in self.sources):
            raise InvalidArgumentsError("Source paths must not be empty")
        if not self.destination.strip():
            raise InvalidArgumentsError("Destination path must not be empty")

        errors: list[str] = []
        if not MIN_CONCURRENCY_LIMIT <= self.concurrency_limit <= MAX_CONCURRENCY_LIMIT:
            errors.append(
                f"concurrency limit must be between {MIN_CONCURRENCY_LIMIT} and "
                f"{MAX_CONCURRENCY_LIMIT}, got {self.concurrency_limit}"
            )
        if not MIN_INTERNAL_THREADS <= self.internal_threads <= MAX_INTERNAL_THREADS:
            errors.append(
                f"internal thread count must be between {MIN_INTERNAL_THREADS} and "
                f"{MAX_INTERNAL_THREADS}, got {self.internal_threads}"
            )
        if errors:
            raise ConfigurationError("; ".join(errors))
        return self

    @property
    def deletes_extra_files(self) -> bool:
        """True when destination-only files will actually be removed."""
        return self.mode is Mode.MIRROR and self.delete_extra


# === RESULTS ===


class JobResult(BaseModel):
    """Outcome of mirroring one source folder."""

    model_config = {"frozen": True}

    folder_name: str
    source: str
    destination: str
    raw_exit_code: int
    bucket: Bucket
    duration_seconds: float = 0.0

    @field_validator("folder_name")
    @classmethod
    def validate_folder_name(cls, v: str) -> str:
        if not v:
            raise ValueError("folder_name must not be empty")
        return v


class BatchSummary(BaseModel):
    """Aggregate over all job results of one invocation."""

    model_config = {"frozen": True}

    total_folders: int
    completed: int
    success: int = 0
    changed: int = 0
    warnings: int = 0
    failed: int = 0
    aborted: bool = False
    tool: ToolFlavor
    mode: Mode = Mode.MIRROR
    duration_seconds: float = 0.0
    timestamp: datetime
    version: str
    results: tuple[JobResult, ...] = Field(default_factory=tuple)
