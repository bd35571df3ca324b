# src/main.py — v1
"""CLI entry point — mirror one or more source folders into a destination.

Usage:
    mirrorbatch <source> [<source> ...] <destination> [options]

The last path is always the destination; all preceding paths are sources.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from mirrorbatch.version import __version__

if TYPE_CHECKING:
    from mirrorbatch.config.settings import Settings
    from mirrorbatch.core.models import BackupRequest

logger = logging.getLogger("mirrorbatch.main")

_EPILOG = """\
examples:
  mirrorbatch /home/user/docs /home/user/projects /backup
  mirrorbatch /home/user/docs /backup --validate
  mirrorbatch /src1 /src2 /backup --parallel --log --export-json

exit codes:
  0  success
  1  configuration, dependency or path error (nothing was run)
  2  partial success (changes or warnings reported by the tool)
  4  at least one folder failed
"""


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point. Never raises; returns the process exit status."""
    from mirrorbatch.core.errors import InvalidArgumentsError, MirrorBatchError
    from mirrorbatch.core.models import ExitStatus

    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # --help / --version exit 0; usage errors become a fatal status
        return int(ExitStatus.SUCCESS) if exc.code in (0, None) else int(ExitStatus.FATAL)

    try:
        settings = _load_settings(args)
    except (MirrorBatchError, ValueError) as exc:
        _setup_logging(verbose=args.verbose)
        logger.error("ERROR: invalid configuration: %s", exc)
        return int(ExitStatus.FATAL)

    # Console only until validation has passed; the run log is attached later
    _setup_logging(
        verbose=args.verbose,
        level=settings.log_level,
        log_format=settings.log_format,
    )

    try:
        return asyncio.run(_cmd_backup(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return int(ExitStatus.INTERRUPTED)
    except InvalidArgumentsError as exc:
        logger.error("ERROR: %s", exc)
        logger.error("Use --help for usage information.")
        return int(ExitStatus.FATAL)
    except MirrorBatchError as exc:
        logger.error("ERROR: %s", exc)
        return int(ExitStatus.FATAL)
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return int(ExitStatus.FATAL)


def cli() -> None:
    """Console script wrapper."""
    sys.exit(main())


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="mirrorbatch",
        description=(
            f"mirrorbatch v{__version__} - back up multiple folders "
            "with rsync or robocopy"
        ),
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths", nargs="*", metavar="PATH",
        help="Source folders followed by the destination folder",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s v{__version__}",
    )
    parser.add_argument(
        "--log", action="store_true",
        help="Append run events (and the tool's own log) to the log file",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Simulate execution without copying files",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validation mode - list differences only",
    )
    parser.add_argument(
        "--parallel", action="store_true",
        help="Process folders in parallel",
    )
    parser.add_argument(
        "--fail-fast", action="store_true",
        help="Stop dispatching folders after the first failure",
    )
    parser.add_argument(
        "--export-json", action="store_true",
        help="Write the run summary to the JSON summary file",
    )
    parser.add_argument(
        "--no-delete", action="store_true",
        help="Keep files that only exist in the destination (disable mirror mode)",
    )
    parser.add_argument(
        "--threads", dest="internal_threads", type=int, default=None,
        help="Tool's own thread count, robocopy only (default: 16, range 1-128)",
    )
    parser.add_argument(
        "--concurrency", "--throttle", dest="concurrency_limit", type=int, default=None,
        help="Max folders processed in parallel (default: 4, range 1-32)",
    )
    parser.add_argument(
        "--tool", choices=["auto", "rsync", "robocopy"], default=None,
        help="Mirroring tool to drive (default: auto-detect from the host)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    from mirrorbatch.config.settings import load_settings

    overrides: dict[str, object] = {}
    if args.tool is not None:
        overrides["tool"] = args.tool
    return load_settings(**overrides)


def _build_request(args: argparse.Namespace, settings: Settings) -> BackupRequest:
    """Turn parsed arguments plus settings defaults into a BackupRequest."""
    from mirrorbatch.core.models import BackupRequest, resolve_mode
    from mirrorbatch.paths.resolver import split_paths

    sources, destination = split_paths(args.paths)
    return BackupRequest(
        sources=tuple(sources),
        destination=destination,
        mode=resolve_mode(dry_run=args.dry_run, validate=args.validate),
        delete_extra=not args.no_delete,
        parallel=args.parallel,
        concurrency_limit=(
            settings.default_concurrency_limit
            if args.concurrency_limit is None else args.concurrency_limit
        ),
        fail_fast=args.fail_fast,
        internal_threads=(
            settings.default_internal_threads
            if args.internal_threads is None else args.internal_threads
        ),
        log_file=settings.resolved_log_file if args.log else None,
    )


async def _cmd_backup(args: argparse.Namespace, settings: Settings) -> int:
    """Validate everything, run the batch and report."""
    from mirrorbatch.batch.driver import BatchMirrorDriver
    from mirrorbatch.batch.runner import JobRunner
    from mirrorbatch.paths.resolver import ensure_destination, resolve_paths
    from mirrorbatch.policy.exclusions import build_policy
    from mirrorbatch.report.exporter import export_json, render_console
    from mirrorbatch.report.summary import exit_status_for, summarize
    from mirrorbatch.tools.tool_factory import create_tool

    request = _build_request(args, settings)

    tool = create_tool(settings)
    binary = tool.ensure_available()
    logger.debug("Using %s at %s", tool.name, binary)

    resolved = resolve_paths(
        [*request.sources, request.destination],
        flavor=tool.flavor,
        create_destination=False,
    )
    if request.log_file is not None:
        _attach_run_log(request.log_file)
    ensure_destination(resolved.destination)
    policy = build_policy(tool.flavor, settings)

    logger.info("========== STARTING BACKUP ==========")
    logger.info("Sources: %s", ", ".join(resolved.sources))
    logger.info("Destination: %s", resolved.destination)
    logger.info("Tool: %s", tool.name)
    logger.info("Mirror mode: %s", request.deletes_extra_files)
    logger.info("Mode: %s", request.mode.value)
    logger.info("Parallel: %s", request.parallel)

    runner = JobRunner(tool=tool, policy=policy, request=request)
    driver = BatchMirrorDriver(runner)

    started_at = datetime.now(timezone.utc).astimezone()
    outcome = await driver.run_all(
        resolved.sources,
        resolved.destination,
        parallel=request.parallel,
        concurrency_limit=request.concurrency_limit,
        fail_fast=request.fail_fast,
    )

    summary = summarize(
        outcome.results,
        tool=tool.flavor,
        timestamp=started_at,
        total_folders=len(resolved.sources),
        mode=request.mode,
        aborted=outcome.aborted,
        duration_seconds=outcome.duration_seconds,
    )

    print(render_console(summary))
    logger.info(
        "Summary: total=%d success=%d changed=%d warnings=%d failed=%d duration=%.1fs",
        summary.total_folders, summary.success, summary.changed,
        summary.warnings, summary.failed, summary.duration_seconds,
    )

    if args.export_json:
        export_json(summary, settings.resolved_json_file)

    status = exit_status_for(summary)
    logger.info("Exit status: %d (%s)", int(status), status.name.lower())
    return int(status)


def _attach_run_log(log_file: Path) -> None:
    """Start appending run events to the log file.

    Raises:
        LogFileError: If the file or its directory cannot be created.
    """
    from mirrorbatch.core.errors import LogFileError
    from mirrorbatch.logging.logger import attach_file_handler

    try:
        attach_file_handler(log_file)
    except OSError as exc:
        raise LogFileError(str(log_file), exc.strerror or str(exc)) from exc


def _setup_logging(
    verbose: bool,
    level: str = "INFO",
    log_format: str = "text",
) -> None:
    """Configure console logging for CLI usage."""
    from mirrorbatch.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else level,
        log_format=log_format,
    )


if __name__ == "__main__":
    sys.exit(main())
