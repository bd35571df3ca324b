# src/tools/base_tool.py — v1
"""Abstract interface for the wrapped mirroring tools.

An adapter only turns a policy and a request into an argv and knows its
own exit-code table. It never spawns processes; the job runner does.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod

from mirrorbatch.core.classification import classify
from mirrorbatch.core.errors import DependencyMissingError
from mirrorbatch.core.models import BackupRequest, Bucket, ToolFlavor
from mirrorbatch.paths.resolver import separators_for, strip_trailing_separators
from mirrorbatch.policy.exclusions import MirrorPolicy


class BaseMirrorTool(ABC):
    """Unified interface for rsync and robocopy."""

    def __init__(self, binary: str) -> None:
        self._binary = binary

    @property
    @abstractmethod
    def flavor(self) -> ToolFlavor:
        """Exit-code and naming convention of this tool."""

    @property
    def name(self) -> str:
        return self.flavor.value

    @property
    def binary(self) -> str:
        return self._binary

    @property
    def separators(self) -> str:
        return separators_for(self.flavor)

    @abstractmethod
    def build_command(
        self,
        source: str,
        destination: str,
        policy: MirrorPolicy,
        request: BackupRequest,
    ) -> list[str]:
        """Build the full argv for mirroring ``source`` into ``destination``.

        Both paths arrive already stripped of trailing separators.
        """

    def normalize(self, path: str) -> str:
        """Strip trailing separators the way this tool's host expects."""
        return strip_trailing_separators(path, self.separators)

    def join_destination(self, destination_root: str, folder_name: str) -> str:
        """Build ``destination_root/folder_name`` with the host separator."""
        root = self.normalize(destination_root)
        sep = self.separators[-1]
        if root.endswith(tuple(self.separators)):
            return f"{root}{folder_name}"
        return f"{root}{sep}{folder_name}"

    def classify(self, code: int) -> Bucket:
        return classify(code, self.flavor)

    def ensure_available(self) -> str:
        """Return the resolved binary path.

        Raises:
            DependencyMissingError: If the binary cannot be found.
        """
        resolved = shutil.which(self._binary)
        if resolved is None:
            raise DependencyMissingError(self.name, self._binary)
        return resolved
