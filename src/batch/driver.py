# src/batch/driver.py — v1
"""Batch mirror driver — fan the job runner out over all source folders.

Supports:
  - Sequential execution in input order, with a progress notification
    after every job
  - Bounded parallel execution: at most ``concurrency_limit`` child
    processes in flight, results collected in completion order
  - Fail-fast: after a failed result no further job is dispatched;
    jobs already in flight always run to completion

Workers share no mutable state with each other; each one receives the
frozen request and policy through the runner.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Sequence

from mirrorbatch.batch.runner import JobRunner
from mirrorbatch.core.errors import ConfigurationError, FolderNameCollisionError
from mirrorbatch.core.models import (
    MAX_CONCURRENCY_LIMIT,
    MIN_CONCURRENCY_LIMIT,
    Bucket,
    DriverState,
    JobResult,
)
from mirrorbatch.logging.context import set_run_context
from mirrorbatch.paths.resolver import find_collisions

logger = logging.getLogger(__name__)

ProgressFn = Callable[[int, int, JobResult], None]


@dataclass
class DriverOutcome:
    """Everything the driver collected during one run."""

    results: list[JobResult] = field(default_factory=list)
    state: DriverState = DriverState.PENDING
    total: int = 0
    dispatched: int = 0
    duration_seconds: float = 0.0
    run_id: str = ""

    @property
    def aborted(self) -> bool:
        return self.state is DriverState.ABORTED


class BatchMirrorDriver:
    """Run one job per source folder.

    Args:
        runner: Job runner shared by all workers (it holds only frozen config).
        on_progress: Optional callback ``(done, total, result)`` fired after
            each job result becomes available.
    """

    def __init__(
        self,
        runner: JobRunner,
        on_progress: ProgressFn | None = None,
    ) -> None:
        self._runner = runner
        self._on_progress = on_progress
        self.state = DriverState.PENDING

    async def run_all(
        self,
        sources: Sequence[str],
        destination_root: str,
        parallel: bool = False,
        concurrency_limit: int = 4,
        fail_fast: bool = False,
    ) -> DriverOutcome:
        """Mirror every source into ``destination_root``.

        Returns:
            DriverOutcome with all results collected so far. Sequential
            runs keep input order; parallel runs keep completion order.

        Raises:
            ConfigurationError: Out-of-range concurrency limit.
            FolderNameCollisionError: Two sources share a folder name.
        """
        if not MIN_CONCURRENCY_LIMIT <= concurrency_limit <= MAX_CONCURRENCY_LIMIT:
            raise ConfigurationError(
                f"concurrency limit must be between {MIN_CONCURRENCY_LIMIT} and "
                f"{MAX_CONCURRENCY_LIMIT}, got {concurrency_limit}"
            )
        collisions = find_collisions(sources, self._runner.tool.flavor)
        if collisions:
            raise FolderNameCollisionError(collisions)

        outcome = DriverOutcome(total=len(sources), run_id=uuid.uuid4().hex[:12])
        set_run_context(outcome.run_id)

        start = time.perf_counter()
        self.state = DriverState.RUNNING
        outcome.state = self.state

        if parallel:
            logger.info(
                "Executing %d folder(s) in parallel (concurrency limit: %d)",
                len(sources), concurrency_limit,
            )
            aborted = await self._run_parallel(
                sources, destination_root, concurrency_limit, fail_fast, outcome,
            )
        else:
            logger.info("Executing %d folder(s) sequentially", len(sources))
            aborted = await self._run_sequential(
                sources, destination_root, fail_fast, outcome,
            )

        self.state = DriverState.ABORTED if aborted else DriverState.COMPLETED
        outcome.state = self.state
        outcome.duration_seconds = round(time.perf_counter() - start, 3)
        return outcome

    async def _run_sequential(
        self,
        sources: Sequence[str],
        destination_root: str,
        fail_fast: bool,
        outcome: DriverOutcome,
    ) -> bool:
        total = len(sources)
        for index, source in enumerate(sources, start=1):
            outcome.dispatched += 1
            result = await self._runner.run(source, destination_root)
            outcome.results.append(result)
            self._notify(index, total, result)

            if fail_fast and result.bucket is Bucket.FAILED:
                self._log_fail_fast(result, total - index)
                return True
        return False

    async def _run_parallel(
        self,
        sources: Sequence[str],
        destination_root: str,
        concurrency_limit: int,
        fail_fast: bool,
        outcome: DriverOutcome,
    ) -> bool:
        total = len(sources)
        pending = iter(sources)
        aborted = False

        async def worker() -> None:
            nonlocal aborted
            # The abort flag is checked before taking the next source, so
            # nothing is dispatched once a failure has been observed.
            while not aborted:
                source = next(pending, None)
                if source is None:
                    return
                outcome.dispatched += 1
                result = await self._runner.run(source, destination_root)
                outcome.results.append(result)
                self._notify(len(outcome.results), total, result)

                if fail_fast and result.bucket is Bucket.FAILED and not aborted:
                    aborted = True
                    self._log_fail_fast(result, total - outcome.dispatched)

        workers = min(concurrency_limit, total)
        await asyncio.gather(*(worker() for _ in range(workers)))
        return aborted

    def _notify(self, done: int, total: int, result: JobResult) -> None:
        logger.info("Progress: %d/%d (%s: %s)", done, total, result.folder_name, result.bucket.value)
        if self._on_progress is not None:
            self._on_progress(done, total, result)

    @staticmethod
    def _log_fail_fast(result: JobResult, skipped: int) -> None:
        logger.error(
            "FAIL-FAST: critical error in %s (exit code: %d), %d folder(s) not dispatched",
            result.folder_name, result.raw_exit_code, skipped,
        )
