# src/gui/command.py — v1
"""Plumbing shared by GUI front-ends that shell out to the CLI.

A front-end collects a selection and options, runs ``preflight`` and then
invokes the CLI with ``build_cli_args``. It must only ever pass the
documented flags, and it refuses to drive a CLI whose version is not
compatible with its own.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field

from mirrorbatch.core.models import MAX_CONCURRENCY_LIMIT, MIN_CONCURRENCY_LIMIT

_VERSION_RE = re.compile(r"v?(\d+)\.(\d+)\.(\d+)")


class GuiValidationError(Exception):
    """Raised when the GUI selection is not ready to run."""


class GuiSelection(BaseModel):
    """Folders picked in the GUI."""

    sources: list[str] = Field(default_factory=list)
    destination: str = ""


class GuiOptions(BaseModel):
    """Options dialog values."""

    copy_mode: Literal["mirror", "sync"] = "mirror"
    execution: Literal["normal", "dry_run", "validate"] = "normal"
    processing: Literal["sequential", "parallel"] = "sequential"
    concurrency_limit: int = Field(default=4, ge=MIN_CONCURRENCY_LIMIT, le=MAX_CONCURRENCY_LIMIT)
    log: bool = False
    export_json: bool = False
    fail_fast: bool = False


def preflight(selection: GuiSelection) -> None:
    """Check the selection before invoking the CLI.

    Raises:
        GuiValidationError: No sources, no destination, or a duplicate source.
    """
    sources = [s for s in selection.sources if s.strip()]
    if not sources:
        raise GuiValidationError("You must add at least one source folder.")
    if not selection.destination.strip():
        raise GuiValidationError("You must select a destination folder.")
    duplicates = sorted({s for s in sources if sources.count(s) > 1})
    if duplicates:
        raise GuiValidationError(f"Source folder added twice: {', '.join(duplicates)}")


def build_cli_args(selection: GuiSelection, options: GuiOptions) -> list[str]:
    """Translate the GUI state into CLI arguments (without the program name)."""
    preflight(selection)

    args = [s for s in selection.sources if s.strip()]
    args.append(selection.destination)

    if options.copy_mode == "sync":
        args.append("--no-delete")

    if options.execution == "dry_run":
        args.append("--dry-run")
    elif options.execution == "validate":
        args.append("--validate")

    if options.processing == "parallel":
        args.extend(["--parallel", "--concurrency", str(options.concurrency_limit)])

    if options.log:
        args.append("--log")
    if options.export_json:
        args.append("--export-json")
    if options.fail_fast:
        args.append("--fail-fast")

    return args


def parse_cli_version(text: str) -> str | None:
    """Extract ``X.Y.Z`` from the CLI's ``--version`` output."""
    match = _VERSION_RE.search(text or "")
    if match is None:
        return None
    return ".".join(match.groups())


def check_version_compatibility(required: str, actual: str | None) -> bool:
    """Major versions must match and the actual minor must be >= the required one."""
    if not actual:
        return False
    req = _VERSION_RE.fullmatch(required.strip())
    act = _VERSION_RE.fullmatch(actual.strip())
    if req is None or act is None:
        return False
    if int(act.group(1)) != int(req.group(1)):
        return False
    return int(act.group(2)) >= int(req.group(2))
