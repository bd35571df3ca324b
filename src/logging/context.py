# src/logging/context.py — v1
"""Contextual logging support — attach run_id and folder to log records.

Context variables are copied into every asyncio task, so concurrent jobs
each log their own folder name without sharing state.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_folder: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "folder", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    folder: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(run_id=_run_id.get(), folder=_folder.get())


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per batch run)."""
    _run_id.set(run_id)


def set_folder_context(folder: str | None) -> contextvars.Token:
    """Set folder-level context for the current job.

    Returns the token needed to restore the previous value.
    """
    return _folder.set(folder)


def reset_folder_context(token: contextvars.Token) -> None:
    _folder.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _folder.set(None)
