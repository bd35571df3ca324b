# src/tools/robocopy_tool.py — v1
"""Robocopy adapter (Windows convention).

Robocopy misreads a trailing backslash before a closing quote, which is
why the runner hands it paths with trailing separators stripped.
"""

from __future__ import annotations

from mirrorbatch.core.models import BackupRequest, Mode, ToolFlavor
from mirrorbatch.policy.exclusions import MirrorPolicy
from mirrorbatch.tools.base_tool import BaseMirrorTool


class RobocopyTool(BaseMirrorTool):
    """Drive ``robocopy`` with the fixed exclusion table."""

    def __init__(self, binary: str = "robocopy") -> None:
        super().__init__(binary)

    @property
    def flavor(self) -> ToolFlavor:
        return ToolFlavor.ROBOCOPY

    def build_command(
        self,
        source: str,
        destination: str,
        policy: MirrorPolicy,
        request: BackupRequest,
    ) -> list[str]:
        cmd = [self.binary, source, destination]

        cmd.append("/MIR" if request.delete_extra else "/E")

        if request.mode.list_only:
            cmd.append("/L")
        if request.mode is Mode.VALIDATE:
            cmd.extend(["/X", "/V"])

        if policy.excluded_files:
            cmd.append("/XF")
            cmd.extend(policy.excluded_files)
        if policy.excluded_dirs:
            cmd.append("/XD")
            cmd.extend(policy.excluded_dirs)
        if policy.exclude_junctions:
            cmd.append("/XJ")

        cmd.extend([
            f"/R:{policy.retry_count}",
            f"/W:{policy.retry_wait_seconds}",
            f"/MT:{request.internal_threads}",
            "/NP",
        ])

        if request.log_file is not None:
            cmd.extend([f"/LOG+:{request.log_file}", "/TEE"])

        return cmd
