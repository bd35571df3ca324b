# src/batch/runner.py — v1
"""Job runner — mirror one source folder through one child process.

A non-zero exit status is normal data here: it is the wrapped tool's own
signal of changes, warnings or errors, and is returned verbatim on the
JobResult. Only argument construction errors raise, and they do so
before anything is spawned.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from mirrorbatch.core.models import BackupRequest, Bucket, JobResult
from mirrorbatch.logging.context import reset_folder_context, set_folder_context
from mirrorbatch.paths.resolver import folder_name_for
from mirrorbatch.policy.exclusions import MirrorPolicy
from mirrorbatch.tools.base_tool import BaseMirrorTool

logger = logging.getLogger(__name__)

# Exit status recorded when the child could not be started at all,
# matching the shell's "command not found". Classified as failed by both tables.
SPAWN_FAILURE_EXIT_CODE = 127

SpawnFn = Callable[[list[str]], Awaitable[int]]


async def spawn_process(argv: list[str]) -> int:
    """Start ``argv`` as a child process and wait for its exit status.

    The child inherits stdout/stderr so the tool's own progress output
    reaches the console.
    """
    process = await asyncio.create_subprocess_exec(*argv)
    return await process.wait()


class JobRunner:
    """Execute one folder job and map its exit status to a JobResult.

    Args:
        tool: Adapter that builds the argv and classifies exit codes.
        policy: Frozen exclusion/flag table shared by all jobs.
        request: Frozen request snapshot (mode, threads, log file).
        spawn: Coroutine running an argv and returning its exit status.
    """

    def __init__(
        self,
        tool: BaseMirrorTool,
        policy: MirrorPolicy,
        request: BackupRequest,
        spawn: SpawnFn | None = None,
    ) -> None:
        self._tool = tool
        self._policy = policy
        self._request = request
        self._spawn = spawn or spawn_process

    @property
    def tool(self) -> BaseMirrorTool:
        return self._tool

    def prepare(self, source: str, destination_root: str) -> tuple[str, str, str, list[str]]:
        """Derive folder name, normalised paths and argv for one job.

        Raises:
            ValueError: If ``source`` or ``destination_root`` is empty.
        """
        if not source or not source.strip():
            raise ValueError("source must be a non-empty path")
        if not destination_root or not destination_root.strip():
            raise ValueError("destination_root must be a non-empty path")

        folder_name = folder_name_for(source, self._tool.separators)
        source_path = self._tool.normalize(source)
        dest_path = self._tool.normalize(
            self._tool.join_destination(destination_root, folder_name)
        )
        argv = self._tool.build_command(source_path, dest_path, self._policy, self._request)
        return folder_name, source_path, dest_path, argv

    async def run(self, source: str, destination_root: str) -> JobResult:
        """Mirror ``source`` into ``destination_root/<folder name>``.

        Returns:
            JobResult carrying the raw exit status and its bucket.
        """
        folder_name, source_path, dest_path, argv = self.prepare(source, destination_root)

        token = set_folder_context(folder_name)
        try:
            logger.info("Processing: %s -> %s", source_path, dest_path)
            logger.debug("Command: %s", " ".join(argv))

            t0 = time.perf_counter()
            try:
                exit_code = await self._spawn(argv)
            except OSError as exc:
                logger.error("Could not start %s: %s", self._tool.name, exc)
                exit_code = SPAWN_FAILURE_EXIT_CODE
            duration = time.perf_counter() - t0

            bucket = self._tool.classify(exit_code)
            level = logging.ERROR if bucket is Bucket.FAILED else (
                logging.WARNING if bucket is Bucket.WARNING else logging.INFO
            )
            logger.log(
                level, "Finished %s: exit code %d (%s) in %.1fs",
                folder_name, exit_code, bucket.value, duration,
            )
        finally:
            reset_folder_context(token)

        return JobResult(
            folder_name=folder_name,
            source=source_path,
            destination=dest_path,
            raw_exit_code=exit_code,
            bucket=bucket,
            duration_seconds=round(duration, 3),
        )
