# src/logging/handlers.py — v1
"""Append-only file handler for the run log.

The log file sits next to the invoked script and is never rotated or
truncated automatically.
"""

from __future__ import annotations

import logging
from pathlib import Path


def create_append_handler(log_file: str | Path) -> logging.FileHandler:
    """Create a file handler that only ever appends.

    Args:
        log_file: Path to log file. Parent directories are created.

    Returns:
        Configured FileHandler in append mode.
    """
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    return logging.FileHandler(
        filename=str(path),
        mode="a",
        encoding="utf-8",
    )
