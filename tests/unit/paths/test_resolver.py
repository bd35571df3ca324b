# tests/unit/paths/test_resolver.py — v1
"""Tests for paths/resolver.py — splitting, naming and validation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from mirrorbatch.core.errors import (
    FolderNameCollisionError,
    InvalidArgumentsError,
    InvalidDestinationError,
    SourceNotFoundError,
)
from mirrorbatch.core.models import ToolFlavor
from mirrorbatch.paths.resolver import (
    POSIX_SEPARATORS,
    WINDOWS_SEPARATORS,
    ensure_destination,
    find_collisions,
    folder_name_for,
    illegal_destination_reason,
    resolve_paths,
    split_paths,
    strip_trailing_separators,
)


class TestStripTrailingSeparators:
    @pytest.mark.parametrize("path,expected", [
        ("/data/photos/", "/data/photos"),
        ("/data/photos//", "/data/photos"),
        ("D:\\Photos\\", "D:\\Photos"),
        ("/", "/"),
        ("C:\\", "C:\\"),
        ("relative", "relative"),
    ])
    def test_strip(self, path: str, expected: str):
        assert strip_trailing_separators(path) == expected

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            strip_trailing_separators("")


class TestFolderNameFor:
    @pytest.mark.parametrize("source,expected", [
        ("/home/user/Documents", "Documents"),
        ("/home/user/Documents/", "Documents"),
        ("Documents", "Documents"),
    ])
    def test_posix_leaf(self, source: str, expected: str):
        assert folder_name_for(source, POSIX_SEPARATORS) == expected

    @pytest.mark.parametrize("source,expected", [
        ("C:\\Users\\me\\Documents", "Documents"),
        ("D:\\Photos\\", "Photos"),
        ("E:/Music", "Music"),
    ])
    def test_windows_leaf(self, source: str, expected: str):
        assert folder_name_for(source, WINDOWS_SEPARATORS) == expected

    def test_drive_root(self):
        assert folder_name_for("C:\\", WINDOWS_SEPARATORS) == "Drive_C"
        assert folder_name_for("d:", WINDOWS_SEPARATORS) == "Drive_D"

    def test_posix_root(self):
        assert folder_name_for("/", POSIX_SEPARATORS) == "root"

    def test_dot_resolves_to_real_name(self, tmp_path: Path, monkeypatch):
        work = tmp_path / "projects"
        work.mkdir()
        monkeypatch.chdir(work)
        assert folder_name_for(".", POSIX_SEPARATORS) == "projects"

    def test_deterministic(self):
        names = {folder_name_for("/a/b/docs/", POSIX_SEPARATORS) for _ in range(5)}
        assert names == {"docs"}


class TestSplitPaths:
    def test_last_is_destination(self):
        sources, destination = split_paths(["/a", "/b", "/dst"])
        assert sources == ["/a", "/b"]
        assert destination == "/dst"

    @pytest.mark.parametrize("paths", [[], ["/only"]])
    def test_too_few(self, paths: list[str]):
        with pytest.raises(InvalidArgumentsError, match="at least one source"):
            split_paths(paths)


class TestIllegalDestinationReason:
    def test_posix_accepts_colon(self):
        assert illegal_destination_reason("/mnt/backup:2026", ToolFlavor.RSYNC) is None

    def test_nul_always_illegal(self):
        assert illegal_destination_reason("/mnt/\x00x", ToolFlavor.RSYNC)

    def test_windows_drive_designator_allowed(self):
        assert illegal_destination_reason("E:\\Backup", ToolFlavor.ROBOCOPY) is None

    @pytest.mark.parametrize("destination", [
        "E:\\Back:up", "E:\\Backup?", "E:\\a|b", "E:\\<x>",
    ])
    def test_windows_illegal(self, destination: str):
        assert illegal_destination_reason(destination, ToolFlavor.ROBOCOPY)


class TestFindCollisions:
    def test_no_collision(self):
        assert find_collisions(["/a/docs", "/b/music"], ToolFlavor.RSYNC) == {}

    def test_same_leaf(self):
        collisions = find_collisions(["/a/docs", "/b/docs"], ToolFlavor.RSYNC)
        assert collisions == {"docs": ["/a/docs", "/b/docs"]}

    def test_case_sensitivity_follows_host(self):
        sources = ["/a/docs", "/b/Docs"]
        assert find_collisions(sources, ToolFlavor.RSYNC) == {}
        assert list(find_collisions(sources, ToolFlavor.ROBOCOPY).values()) == [sources]


class TestResolvePaths:
    def test_happy_path_creates_destination(self, source_tree):
        destination = source_tree["destination"] / "nested"
        resolved = resolve_paths(
            [str(source_tree["alpha"]), str(source_tree["beta"]), str(destination)]
        )
        assert destination.is_dir()
        assert resolved.destination == str(destination)
        assert resolved.folder_names == {
            str(source_tree["alpha"]): "alpha",
            str(source_tree["beta"]): "beta",
        }

    def test_create_destination_disabled(self, source_tree):
        resolve_paths(
            [str(source_tree["alpha"]), str(source_tree["destination"])],
            create_destination=False,
        )
        assert not source_tree["destination"].exists()

    def test_all_missing_sources_reported(self, source_tree, tmp_path: Path):
        missing_a = str(tmp_path / "nope1")
        missing_b = str(tmp_path / "nope2")
        with pytest.raises(SourceNotFoundError) as exc_info:
            resolve_paths(
                [missing_a, str(source_tree["alpha"]), missing_b, str(source_tree["destination"])]
            )
        assert exc_info.value.missing == [missing_a, missing_b]
        assert not source_tree["destination"].exists()

    def test_file_as_source_is_missing(self, source_tree):
        a_file = source_tree["alpha"] / "alpha.txt"
        with pytest.raises(SourceNotFoundError):
            resolve_paths([str(a_file), str(source_tree["destination"])])

    def test_destination_is_a_file(self, source_tree):
        target = source_tree["alpha"] / "alpha.txt"
        with pytest.raises(InvalidDestinationError, match="not a directory"):
            resolve_paths([str(source_tree["beta"]), str(target)])

    def test_collision_detected_before_mkdir(self, source_tree, tmp_path: Path):
        other = tmp_path / "other" / "alpha"
        other.mkdir(parents=True)
        with pytest.raises(FolderNameCollisionError) as exc_info:
            resolve_paths(
                [str(source_tree["alpha"]), str(other), str(source_tree["destination"])]
            )
        assert "alpha" in exc_info.value.collisions
        assert not source_tree["destination"].exists()

    def test_empty_string_rejected(self, source_tree):
        with pytest.raises(InvalidArgumentsError):
            resolve_paths(["", str(source_tree["destination"])])

    def test_too_few_paths(self):
        with pytest.raises(InvalidArgumentsError):
            resolve_paths(["/only"])

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_uncreatable_destination(self, source_tree, tmp_path: Path):
        if hasattr(os, "geteuid") and os.geteuid() == 0:
            pytest.skip("root ignores directory permissions")
        locked = tmp_path / "locked"
        locked.mkdir(mode=0o500)
        try:
            with pytest.raises(InvalidDestinationError, match="cannot be created"):
                resolve_paths([str(source_tree["alpha"]), str(locked / "dst")])
        finally:
            locked.chmod(0o700)


class TestEnsureDestination:
    def test_creates_parents(self, tmp_path: Path):
        target = tmp_path / "a" / "b"
        ensure_destination(str(target))
        assert target.is_dir()

    def test_existing_is_untouched(self, tmp_path: Path):
        (tmp_path / "keep.txt").write_text("x")
        ensure_destination(str(tmp_path))
        assert (tmp_path / "keep.txt").exists()

    def test_blocked_by_file(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(InvalidDestinationError, match="cannot be created"):
            ensure_destination(str(blocker / "dst"))
