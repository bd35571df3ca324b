# src/core/classification.py — v1
"""Exit-code classification tables for the wrapped tools.

Both functions are pure: the same raw code always yields the same bucket.
Negative codes (a child killed by a signal on POSIX) are treated as failures.
"""

from __future__ import annotations

from mirrorbatch.core.models import Bucket, ToolFlavor


def classify_robocopy(code: int) -> Bucket:
    """Robocopy convention: <=1 success, 2-3 changed, 4-7 warning, >7 failed."""
    if code < 0:
        return Bucket.FAILED
    if code <= 1:
        return Bucket.SUCCESS
    if code <= 3:
        return Bucket.CHANGED
    if code <= 7:
        return Bucket.WARNING
    return Bucket.FAILED


def classify_rsync(code: int) -> Bucket:
    """rsync convention: 0 success, 1-3 warning, >3 failed. No changed bucket."""
    if code == 0:
        return Bucket.SUCCESS
    if 1 <= code <= 3:
        return Bucket.WARNING
    return Bucket.FAILED


_CLASSIFIERS = {
    ToolFlavor.ROBOCOPY: classify_robocopy,
    ToolFlavor.RSYNC: classify_rsync,
}


def classify(code: int, flavor: ToolFlavor) -> Bucket:
    """Classify a raw exit code with the table of the given tool."""
    return _CLASSIFIERS[flavor](code)
