# tests/unit/tools/test_robocopy_tool.py — v1
"""Tests for tools/robocopy_tool.py — argv construction."""

from __future__ import annotations

from pathlib import Path

from mirrorbatch.core.models import Bucket, Mode, ToolFlavor
from mirrorbatch.policy.exclusions import build_policy
from mirrorbatch.tools.robocopy_tool import RobocopyTool


def _argv(make_request, **overrides) -> list[str]:
    return RobocopyTool().build_command(
        "C:\\Users\\me\\Documents", "E:\\Backup\\Documents",
        build_policy(ToolFlavor.ROBOCOPY), make_request(**overrides),
    )


def _section(argv: list[str], flag: str) -> list[str]:
    start = argv.index(flag) + 1
    end = start
    while end < len(argv) and not argv[end].startswith("/"):
        end += 1
    return argv[start:end]


class TestRobocopyCommand:
    def test_mirror(self, make_request):
        argv = _argv(make_request)
        assert argv[:4] == [
            "robocopy", "C:\\Users\\me\\Documents", "E:\\Backup\\Documents", "/MIR",
        ]
        assert "/L" not in argv
        assert "/XJ" in argv
        assert "/NP" in argv

    def test_no_delete_uses_copy_subdirs(self, make_request):
        argv = _argv(make_request, delete_extra=False)
        assert "/E" in argv
        assert "/MIR" not in argv

    def test_exclusions(self, make_request):
        argv = _argv(make_request)
        assert _section(argv, "/XF") == ["desktop.ini", "Thumbs.db", "*.tmp", "~*"]
        assert "$RECYCLE.BIN" in argv
        assert "System Volume Information" in argv
        assert ".git" not in argv

    def test_numeric_options(self, make_request):
        argv = _argv(make_request, internal_threads=32)
        assert "/MT:32" in argv
        assert "/R:2" in argv
        assert "/W:2" in argv

    def test_dry_run_lists_only(self, make_request):
        argv = _argv(make_request, mode=Mode.DRY_RUN)
        assert "/L" in argv
        assert "/X" not in argv

    def test_validate(self, make_request):
        argv = _argv(make_request, mode=Mode.VALIDATE)
        assert "/L" in argv
        assert "/X" in argv
        assert "/V" in argv

    def test_log_file(self, make_request):
        log = Path("C:/logs/mb.log")
        argv = _argv(make_request, log_file=log)
        assert f"/LOG+:{log}" in argv
        assert argv[-1] == "/TEE"


class TestRobocopyTool:
    def test_identity(self):
        tool = RobocopyTool()
        assert tool.flavor is ToolFlavor.ROBOCOPY
        assert tool.name == "robocopy"

    def test_normalize_strips_trailing_backslash(self):
        tool = RobocopyTool()
        assert tool.normalize("D:\\Photos\\") == "D:\\Photos"
        assert tool.normalize("C:\\") == "C:\\"

    def test_join_destination(self):
        tool = RobocopyTool()
        assert tool.join_destination("E:\\Backup\\", "Photos") == "E:\\Backup\\Photos"
        assert tool.join_destination("E:\\", "Drive_C") == "E:\\Drive_C"

    def test_classify(self):
        tool = RobocopyTool()
        assert tool.classify(1) is Bucket.SUCCESS
        assert tool.classify(3) is Bucket.CHANGED
        assert tool.classify(8) is Bucket.FAILED
