# tests/integration/conftest.py — v1
"""Shared fixtures for integration tests that start real child processes.

- ``stub_tool``: an executable shell script standing in for rsync. It
  records its argv and exits with a code chosen by folder name.
- ``require_rsync``: skips when no rsync binary is installed.

POSIX only: the stub is a ``/bin/sh`` script.
"""

from __future__ import annotations

import os
import shutil
import stat
from pathlib import Path

import pytest

_STUB_SCRIPT = """\
#!/bin/sh
# Records argv (one line per call) and exits according to the source folder name.
printf '%s\\n' "$*" >> "{calls}"
for arg in "$@"; do
    case "$arg" in
        */slow/) sleep 0.3 ;;
        */warn/) exit 2 ;;
        */broken/) exit 23 ;;
    esac
done
exit 0
"""


@pytest.fixture
def stub_tool(tmp_path: Path) -> Path:
    """Path to an executable fake rsync. Its calls go to ``<stub>.calls``."""
    if os.name == "nt":
        pytest.skip("stub tool is a POSIX shell script")
    stub = tmp_path / "bin" / "fake-rsync"
    stub.parent.mkdir()
    stub.write_text(_STUB_SCRIPT.format(calls=f"{stub}.calls"))
    stub.chmod(stub.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return stub


@pytest.fixture
def require_rsync() -> str:
    binary = shutil.which("rsync")
    if binary is None:
        pytest.skip("rsync not installed")
    return binary


@pytest.fixture
def make_sources(tmp_path: Path):
    """Create named source folders, each holding one file."""

    def _make(*names: str) -> list[Path]:
        folders = []
        for name in names:
            folder = tmp_path / "sources" / name
            folder.mkdir(parents=True)
            (folder / "data.txt").write_text(f"payload {name}")
            folders.append(folder)
        return folders

    return _make
