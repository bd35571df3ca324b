# src/report/summary.py — v1
"""Summary reporter — aggregate job results into one BatchSummary.

``summarize`` is pure: the same results and arguments always give an
identical summary. Results are deduplicated by folder name (last one
wins), so feeding the same result list twice never double counts.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Iterable

from mirrorbatch.core.models import (
    BatchSummary,
    Bucket,
    ExitStatus,
    JobResult,
    Mode,
    ToolFlavor,
)
from mirrorbatch.version import __version__


def deduplicate(results: Iterable[JobResult]) -> list[JobResult]:
    """Keep one result per folder name, in first-seen order, last value wins."""
    by_folder: dict[str, JobResult] = {}
    for result in results:
        by_folder[result.folder_name] = result
    return list(by_folder.values())


def summarize(
    results: Iterable[JobResult],
    *,
    tool: ToolFlavor,
    timestamp: datetime,
    total_folders: int | None = None,
    mode: Mode = Mode.MIRROR,
    aborted: bool = False,
    duration_seconds: float = 0.0,
    version: str = __version__,
) -> BatchSummary:
    """Tally results per bucket.

    Args:
        results: Job results in any order.
        tool: Which tool produced them.
        timestamp: Start time of the run.
        total_folders: Number of input sources. May exceed the number of
            results after a fail-fast abort. Defaults to the result count.
        mode: Effective copy mode.
        aborted: Whether fail-fast stopped dispatching.
        duration_seconds: Wall-clock duration of the run.
        version: Version string recorded in the summary.
    """
    unique = deduplicate(results)
    counts = Counter(r.bucket for r in unique)

    return BatchSummary(
        total_folders=len(unique) if total_folders is None else total_folders,
        completed=len(unique),
        success=counts[Bucket.SUCCESS],
        changed=counts[Bucket.CHANGED],
        warnings=counts[Bucket.WARNING],
        failed=counts[Bucket.FAILED],
        aborted=aborted,
        tool=tool,
        mode=mode,
        duration_seconds=duration_seconds,
        timestamp=timestamp,
        version=version,
        results=tuple(unique),
    )


def exit_status_for(summary: BatchSummary) -> ExitStatus:
    """Map a summary to the process exit status."""
    if summary.failed > 0:
        return ExitStatus.FAILURE
    if summary.warnings > 0 or summary.changed > 0:
        return ExitStatus.PARTIAL
    return ExitStatus.SUCCESS
