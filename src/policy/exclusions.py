# src/policy/exclusions.py — v1
"""Exclusion and flag policy applied uniformly to every job of a run.

The table is fixed: users cannot add or remove patterns. Only the retry
values come from settings, and they are handed to the wrapped tool
untouched; the driver never retries on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from mirrorbatch.core.models import ToolFlavor

if TYPE_CHECKING:
    from mirrorbatch.config.settings import Settings

EXCLUDED_FILES: tuple[str, ...] = ("desktop.ini", "Thumbs.db", "*.tmp", "~*")
EXCLUDED_DIRS: tuple[str, ...] = (
    "$RECYCLE.BIN",
    "System Volume Information",
    "node_modules",
    "site-packages",
)
RSYNC_EXTRA_EXCLUDED_DIRS: tuple[str, ...] = (".git",)

DEFAULT_RETRY_COUNT = 2
DEFAULT_RETRY_WAIT_SECONDS = 2


class MirrorPolicy(BaseModel):
    """Immutable exclusion/flag table for one run."""

    model_config = {"frozen": True}

    flavor: ToolFlavor
    excluded_files: tuple[str, ...] = EXCLUDED_FILES
    excluded_dirs: tuple[str, ...] = EXCLUDED_DIRS
    exclude_junctions: bool = True
    retry_count: int = Field(default=DEFAULT_RETRY_COUNT, ge=0)
    retry_wait_seconds: int = Field(default=DEFAULT_RETRY_WAIT_SECONDS, ge=0)


def build_policy(
    flavor: ToolFlavor, settings: Settings | None = None,
) -> MirrorPolicy:
    """Build the policy for a tool flavor.

    The rsync variant additionally skips ``.git`` directories.
    """
    excluded_dirs = EXCLUDED_DIRS
    if flavor is ToolFlavor.RSYNC:
        excluded_dirs = EXCLUDED_DIRS + RSYNC_EXTRA_EXCLUDED_DIRS

    return MirrorPolicy(
        flavor=flavor,
        excluded_dirs=excluded_dirs,
        retry_count=DEFAULT_RETRY_COUNT if settings is None else settings.retry_count,
        retry_wait_seconds=(
            DEFAULT_RETRY_WAIT_SECONDS if settings is None else settings.retry_wait_seconds
        ),
    )
