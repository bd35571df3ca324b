# src/tools/rsync_tool.py — v1
"""rsync adapter (Linux convention).

rsync treats a trailing ``/`` on the source as "copy the contents", so
paths are stripped first and exactly one separator is appended back.
rsync exposes no retry or thread flags: the policy's retry values and
``internal_threads`` are not forwarded.
"""

from __future__ import annotations

from mirrorbatch.core.models import BackupRequest, Mode, ToolFlavor
from mirrorbatch.policy.exclusions import MirrorPolicy
from mirrorbatch.tools.base_tool import BaseMirrorTool


class RsyncTool(BaseMirrorTool):
    """Drive ``rsync -a`` with the fixed exclusion table."""

    def __init__(self, binary: str = "rsync") -> None:
        super().__init__(binary)

    @property
    def flavor(self) -> ToolFlavor:
        return ToolFlavor.RSYNC

    def build_command(
        self,
        source: str,
        destination: str,
        policy: MirrorPolicy,
        request: BackupRequest,
    ) -> list[str]:
        cmd = [self.binary, "-a", "-v", "--progress"]

        cmd.extend(f"--exclude={pattern}" for pattern in policy.excluded_files)
        # Trailing slash restricts the pattern to directories
        cmd.extend(f"--exclude={name}/" for name in policy.excluded_dirs)

        if request.deletes_extra_files:
            cmd.append("--delete")

        if request.mode.list_only:
            cmd.append("--dry-run")
        if request.mode is Mode.VALIDATE:
            cmd.append("--itemize-changes")

        if request.log_file is not None:
            cmd.append(f"--log-file={request.log_file}")

        cmd.append(_with_trailing_slash(source))
        cmd.append(_with_trailing_slash(destination))
        return cmd


def _with_trailing_slash(path: str) -> str:
    return path if path.endswith("/") else f"{path}/"
