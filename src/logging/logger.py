# src/logging/logger.py — v1
"""Logger factory with JSON and text formatters."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from mirrorbatch.logging.context import get_context

ROOT_LOGGER_NAME = "mirrorbatch"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with run/folder context when set."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context_dict = ctx.as_dict()
        if context_dict:
            log_entry["context"] = context_dict

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Timestamped single-line text, e.g. ``2026-01-01 10:00:00 [INFO] ... - msg``."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        parts = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname}]",
            record.name,
        ]
        if ctx.folder:
            parts.append(f"[{ctx.folder}]")
        parts.append(f"- {record.getMessage()}")
        line = " ".join(parts)
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Configuration is applied by setup_logging()."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | Path | None = None,
) -> None:
    """Configure the root mirrorbatch logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
        log_file: Path to the append-only log file (None = console only).
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates on re-init
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonFormatter()
    else:
        formatter = TextFormatter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        from mirrorbatch.logging.handlers import create_append_handler

        file_handler = create_append_handler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def attach_file_handler(log_file: str | Path) -> logging.Handler:
    """Add the append-only run log to an already configured root logger.

    Uses the formatter of the existing console handler.

    Raises:
        OSError: If the log file or its directory cannot be created.
    """
    from mirrorbatch.logging.handlers import create_append_handler

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    file_handler = create_append_handler(log_file)
    formatter = next(
        (h.formatter for h in root_logger.handlers if h.formatter is not None),
        TextFormatter(),
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    return file_handler
