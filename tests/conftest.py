# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides a fake process spawner, request/runner factories and a temporary
source tree. No child processes are started by unit tests.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Callable

import pytest

from mirrorbatch.batch.runner import JobRunner
from mirrorbatch.core.models import BackupRequest, ToolFlavor
from mirrorbatch.logging.context import clear_context
from mirrorbatch.logging.logger import ROOT_LOGGER_NAME
from mirrorbatch.policy.exclusions import build_policy
from mirrorbatch.tools.tool_factory import create_tool


class FakeSpawner:
    """Stand-in for ``spawn_process`` that never starts a process.

    Exit codes and delays are looked up by the leaf folder name found in
    the argv. Tracks how many calls are in flight at once.
    """

    def __init__(
        self,
        codes: dict[str, int] | None = None,
        default: int = 0,
        delay: float = 0.0,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.codes = codes or {}
        self.default = default
        self.delay = delay
        self.delays = delays or {}
        self.calls: list[list[str]] = []
        self.started: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _folder(self, argv: list[str]) -> str | None:
        leaves = {re.split(r"[\\/]", a.rstrip("/\\"))[-1] for a in argv[1:]}
        for name in {**self.codes, **self.delays}:
            if name in leaves:
                return name
        return None

    async def __call__(self, argv: list[str]) -> int:
        self.calls.append(list(argv))
        folder = self._folder(argv)
        self.started.append(folder or "")
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(folder, self.delay))
        finally:
            self.in_flight -= 1
        return self.codes.get(folder, self.default)


# === FIXTURES: Logging ===


@pytest.fixture(autouse=True)
def _clean_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture(autouse=True)
def _reset_mirrorbatch_logger():
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


# === FIXTURES: Fakes and factories ===


@pytest.fixture
def fake_spawner() -> type[FakeSpawner]:
    """The FakeSpawner class, to be instantiated per test."""
    return FakeSpawner


@pytest.fixture
def make_request() -> Callable[..., BackupRequest]:
    """Factory for BackupRequest with sensible defaults."""

    def _make(**overrides: object) -> BackupRequest:
        fields: dict[str, object] = {
            "sources": ("/data/a", "/data/b"),
            "destination": "/dst",
        }
        fields.update(overrides)
        return BackupRequest(**fields)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def make_runner(make_request) -> Callable[..., JobRunner]:
    """Factory for a JobRunner wired to a fake spawner."""

    def _make(
        spawner: FakeSpawner,
        flavor: ToolFlavor = ToolFlavor.RSYNC,
        **request_overrides: object,
    ) -> JobRunner:
        return JobRunner(
            tool=create_tool(flavor=flavor),
            policy=build_policy(flavor),
            request=make_request(**request_overrides),
            spawn=spawner,
        )

    return _make


# === FIXTURES: Temp dirs ===


@pytest.fixture
def source_tree(tmp_path: Path) -> dict[str, Path]:
    """Three populated source folders and a destination path (not created)."""
    sources = {}
    for name in ("alpha", "beta", "gamma"):
        folder = tmp_path / "src" / name
        folder.mkdir(parents=True)
        (folder / f"{name}.txt").write_text(f"content of {name}")
        sources[name] = folder
    sources["destination"] = tmp_path / "backup"
    return sources
