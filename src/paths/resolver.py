# src/paths/resolver.py — v1
"""Path resolver — split, validate and normalise the positional path list.

The last path is always the destination; all preceding paths are sources.
Every source mirrors into ``destination/<folder name>``, so folder names
must be non-empty and unique within one run.

Creating the destination directory is the only filesystem mutation here.
"""

from __future__ import annotations

import logging
import os
import re
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from mirrorbatch.core.errors import (
    FolderNameCollisionError,
    InvalidArgumentsError,
    InvalidDestinationError,
    SourceNotFoundError,
)
from mirrorbatch.core.models import ToolFlavor

logger = logging.getLogger(__name__)

POSIX_SEPARATORS = "/"
WINDOWS_SEPARATORS = "/\\"

_DRIVE_RE = re.compile(r"^([A-Za-z]):$")
_WINDOWS_ILLEGAL_CHARS = set('<>"|?*')


@dataclass(frozen=True)
class ResolvedPaths:
    """Validated sources, destination and the folder name of each source."""

    sources: tuple[str, ...]
    destination: str
    folder_names: dict[str, str] = field(default_factory=dict)


def separators_for(flavor: ToolFlavor) -> str:
    """Path separators understood by the host the tool runs on."""
    return WINDOWS_SEPARATORS if flavor is ToolFlavor.ROBOCOPY else POSIX_SEPARATORS


def strip_trailing_separators(path: str, separators: str = WINDOWS_SEPARATORS) -> str:
    """Remove trailing separators, keeping filesystem roots intact.

    ``/data/photos/`` becomes ``/data/photos``; ``/`` and ``C:\\`` are
    returned unchanged because stripping them would change their meaning.

    Raises:
        ValueError: If ``path`` is empty.
    """
    if not path:
        raise ValueError("Path must not be empty")

    stripped = path.rstrip(separators)
    if not stripped:
        return path[0]
    if _DRIVE_RE.match(stripped) and len(path) > len(stripped):
        return stripped + path[len(stripped)]
    return stripped


def folder_name_for(source: str, separators: str = WINDOWS_SEPARATORS) -> str:
    """Derive the destination subfolder name for a source path.

    Uses the leaf component. Paths without a usable leaf get a
    deterministic fallback: ``Drive_C`` for a drive root, ``root`` for
    the POSIX root.
    """
    trimmed = strip_trailing_separators(source, separators).rstrip(separators)
    leaf = re.split(f"[{re.escape(separators)}]", trimmed)[-1] if trimmed else ""

    drive = _DRIVE_RE.match(leaf)
    if drive and separators == WINDOWS_SEPARATORS:
        return f"Drive_{drive.group(1).upper()}"

    if leaf in {".", ".."}:
        leaf = Path(trimmed).resolve().name

    if not leaf:
        return "root"
    return leaf


def split_paths(paths: Sequence[str]) -> tuple[list[str], str]:
    """Split the positional path list into ``(sources, destination)``."""
    if len(paths) < 2:
        raise InvalidArgumentsError(
            "You must specify at least one source folder and one destination folder."
        )
    return list(paths[:-1]), paths[-1]


def find_missing_sources(sources: Sequence[str]) -> list[str]:
    """Return every source that does not exist or is not a directory."""
    return [s for s in sources if not os.path.isdir(s)]


def illegal_destination_reason(destination: str, flavor: ToolFlavor) -> str | None:
    """Explain why the destination name is illegal on the host, or None if it is fine."""
    if "\x00" in destination:
        return "contains a NUL character"

    if flavor is ToolFlavor.ROBOCOPY:
        body = destination
        if len(body) >= 2 and body[1] == ":" and body[0].isalpha():
            body = body[2:]
        if ":" in body:
            return "contains ':' outside the drive designator"
        bad = sorted({c for c in body if c in _WINDOWS_ILLEGAL_CHARS or ord(c) < 32})
        if bad:
            return "contains characters illegal on Windows: " + " ".join(repr(c) for c in bad)
    return None


def find_collisions(
    sources: Sequence[str], flavor: ToolFlavor,
) -> dict[str, list[str]]:
    """Group sources that resolve to the same destination folder name.

    Names compare case-insensitively for robocopy, as NTFS does.
    """
    separators = separators_for(flavor)
    groups: dict[str, list[str]] = defaultdict(list)
    display: dict[str, str] = {}
    for source in sources:
        name = folder_name_for(source, separators)
        key = name.casefold() if flavor is ToolFlavor.ROBOCOPY else name
        groups[key].append(source)
        display.setdefault(key, name)
    return {display[k]: v for k, v in groups.items() if len(v) > 1}


def resolve_paths(
    paths: Sequence[str],
    flavor: ToolFlavor = ToolFlavor.RSYNC,
    create_destination: bool = True,
) -> ResolvedPaths:
    """Validate the path list and prepare the destination.

    Args:
        paths: Positional paths, destination last.
        flavor: Tool flavor, which decides separator and naming rules.
        create_destination: Create the destination (and parents) if absent.

    Returns:
        ResolvedPaths with one folder name per source.

    Raises:
        InvalidArgumentsError: Fewer than two paths.
        SourceNotFoundError: With every missing source.
        InvalidDestinationError: Illegal name, or an existing non-directory.
        FolderNameCollisionError: Two sources share a folder name.
    """
    sources, destination = split_paths(paths)
    if any(not s for s in sources) or not destination:
        raise InvalidArgumentsError("Paths must not be empty strings")

    missing = find_missing_sources(sources)
    if missing:
        raise SourceNotFoundError(missing)

    reason = illegal_destination_reason(destination, flavor)
    if reason:
        raise InvalidDestinationError(destination, reason)
    if os.path.exists(destination) and not os.path.isdir(destination):
        raise InvalidDestinationError(destination, "exists but is not a directory")

    collisions = find_collisions(sources, flavor)
    if collisions:
        raise FolderNameCollisionError(collisions)

    if create_destination:
        ensure_destination(destination)

    separators = separators_for(flavor)
    return ResolvedPaths(
        sources=tuple(sources),
        destination=destination,
        folder_names={s: folder_name_for(s, separators) for s in sources},
    )


def ensure_destination(destination: str) -> None:
    """Create the destination directory (and parents) if it is absent.

    Raises:
        InvalidDestinationError: If the directory cannot be created.
    """
    if os.path.isdir(destination):
        return
    logger.info("Creating destination directory: %s", destination)
    try:
        Path(destination).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise InvalidDestinationError(destination, f"cannot be created ({exc})") from exc
