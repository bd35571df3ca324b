# src/core/errors.py — v1
"""Exception taxonomy for fatal, pre-dispatch errors.

Per-job outcomes are never raised: a warning or failure reported by the
wrapped tool travels as ``JobResult.bucket``. Everything here aborts the
run before the first child process is spawned.
"""

from __future__ import annotations


class MirrorBatchError(Exception):
    """Base class for all fatal mirrorbatch errors."""


class ConfigurationError(MirrorBatchError):
    """Raised when arguments or settings are inconsistent or out of range.

    Deliberately not a ValueError subclass, so pydantic validators let it
    propagate unchanged.
    """


class InvalidArgumentsError(ConfigurationError):
    """Raised when the positional path list cannot be split into sources and destination."""


class FolderNameCollisionError(ConfigurationError):
    """Raised when two sources would mirror into the same destination subfolder."""

    def __init__(self, collisions: dict[str, list[str]]) -> None:
        self.collisions = collisions
        details = "; ".join(
            f"{name!r} <- {', '.join(sources)}"
            for name, sources in sorted(collisions.items())
        )
        super().__init__(f"Source folders share a destination name: {details}")


class SourceNotFoundError(MirrorBatchError):
    """Raised with every source path that is missing or not a directory."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Source folder(s) do not exist or are not directories: "
            + ", ".join(self.missing)
        )


class InvalidDestinationError(MirrorBatchError):
    """Raised when the destination cannot be used as a directory."""

    def __init__(self, destination: str, reason: str) -> None:
        self.destination = destination
        self.reason = reason
        super().__init__(f"Invalid destination {destination!r}: {reason}")


class DependencyMissingError(MirrorBatchError):
    """Raised when the wrapped mirroring tool is not installed on the host."""

    def __init__(self, tool: str, binary: str) -> None:
        self.tool = tool
        self.binary = binary
        super().__init__(
            f"{tool} is not installed or not on PATH (looked for {binary!r}). "
            "Please install it first."
        )


class LogFileError(MirrorBatchError):
    """Raised when the run log requested with --log cannot be opened."""

    def __init__(self, log_file: str, reason: str) -> None:
        self.log_file = log_file
        self.reason = reason
        super().__init__(f"Cannot open log file {log_file!r}: {reason}")
