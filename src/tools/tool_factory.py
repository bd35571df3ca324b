# src/tools/tool_factory.py — v1
"""Factory for mirroring tool adapters."""

from __future__ import annotations

from mirrorbatch.config.settings import Settings
from mirrorbatch.core.models import ToolFlavor
from mirrorbatch.tools.base_tool import BaseMirrorTool


def create_tool(
    settings: Settings | None = None,
    flavor: ToolFlavor | None = None,
) -> BaseMirrorTool:
    """Instantiate the adapter for the configured tool.

    Args:
        settings: Application settings. Defaults to host detection and
            the plain binary names.
        flavor: Explicit flavor, overriding ``settings.tool``.

    Returns:
        Configured BaseMirrorTool implementation.
    """
    if flavor is None:
        flavor = Settings(_env_file=None).tool_flavor if settings is None else settings.tool_flavor

    if flavor is ToolFlavor.RSYNC:
        from mirrorbatch.tools.rsync_tool import RsyncTool
        binary = "rsync" if settings is None else settings.rsync_binary
        return RsyncTool(binary=binary)

    if flavor is ToolFlavor.ROBOCOPY:
        from mirrorbatch.tools.robocopy_tool import RobocopyTool
        binary = "robocopy" if settings is None else settings.robocopy_binary
        return RobocopyTool(binary=binary)

    raise ValueError(f"Unsupported mirroring tool: {flavor!r}")
