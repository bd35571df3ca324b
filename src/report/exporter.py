# src/report/exporter.py — v1
"""Summary export to console text and to the JSON summary document."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mirrorbatch.core.models import BatchSummary, ToolFlavor

logger = logging.getLogger(__name__)


def format_duration(seconds: float) -> str:
    return f"{int(round(seconds))}s"


def render_console(summary: BatchSummary) -> str:
    """Generate the human-readable summary block.

    Args:
        summary: Batch summary.

    Returns:
        Formatted summary string.
    """
    lines: list[str] = [
        "========== SUMMARY ==========",
        f"Tool          : {summary.tool.value}",
        f"Mode          : {summary.mode.value}",
        f"Total folders : {summary.total_folders}",
        f"Success       : {summary.success}",
    ]
    if summary.tool is ToolFlavor.ROBOCOPY:
        lines.append(f"Changed       : {summary.changed}")
    lines.extend([
        f"Warnings      : {summary.warnings}",
        f"Failed        : {summary.failed}",
        f"Duration      : {format_duration(summary.duration_seconds)}",
    ])

    if summary.aborted:
        not_run = summary.total_folders - summary.completed
        lines.append(f"Aborted       : fail-fast, {not_run} folder(s) not run")

    if summary.results:
        lines.append("")
        lines.append("--- Per Folder ---")
        for r in summary.results:
            lines.append(
                f"  {r.folder_name:30s} | exit {r.raw_exit_code:3d} | {r.bucket.value}"
            )

    lines.append("=============================")
    return "\n".join(lines)


def summary_document(summary: BatchSummary) -> dict[str, Any]:
    """Build the JSON summary document.

    ``changed`` is only present for robocopy, which is the only tool with a
    separate changed bucket.
    """
    doc: dict[str, Any] = {
        "total_folders": summary.total_folders,
        "success": summary.success,
    }
    if summary.tool is ToolFlavor.ROBOCOPY:
        doc["changed"] = summary.changed
    doc.update({
        "warnings": summary.warnings,
        "failed": summary.failed,
        "duration": format_duration(summary.duration_seconds),
        "duration_seconds": summary.duration_seconds,
        "timestamp": summary.timestamp.isoformat(timespec="seconds"),
        "version": summary.version,
        "tool": summary.tool.value,
        "mode": summary.mode.value,
        "aborted": summary.aborted,
        "folders": [
            {
                "folder": r.folder_name,
                "source": r.source,
                "exit_code": r.raw_exit_code,
                "bucket": r.bucket.value,
            }
            for r in summary.results
        ],
    })
    return doc


def export_json(summary: BatchSummary, path: Path) -> None:
    """Write the summary document, overwriting any previous run.

    Args:
        summary: Batch summary to export.
        path: Output file path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(summary_document(summary), indent=2) + "\n", encoding="utf-8",
    )
    logger.info("Summary exported to: %s", path)
