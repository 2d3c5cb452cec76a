"""CLI command that remediates audio and extracts captions."""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any

import click

from streamfix.cli.common import build_executor, build_introspector, resolve_policy
from streamfix.cli.exit_codes import ExitCode
from streamfix.cli.output import error_exit
from streamfix.config import get_config
from streamfix.workflow import (
    FileProcessingResult,
    FileProcessor,
    ProcessingOutcome,
    discover_files,
    process_files,
    resolve_worker_count,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Result Formatting
# =============================================================================

_STATUS_LABELS = {
    ProcessingOutcome.CONFORMING: "OK",
    ProcessingOutcome.REJECTED: "SKIPPED",
    ProcessingOutcome.REMEDIATED: "FIXED",
    ProcessingOutcome.SUBTITLES_ONLY: "CAPTIONS",
    ProcessingOutcome.UNCHANGED: "UNCHANGED",
    ProcessingOutcome.FAILED: "FAILED",
}


def _status_label(result: FileProcessingResult) -> str:
    label = _STATUS_LABELS[result.outcome]
    if result.dry_run and result.outcome in (
        ProcessingOutcome.REMEDIATED,
        ProcessingOutcome.SUBTITLES_ONLY,
    ):
        return f"WOULD {'FIX' if label == 'FIXED' else 'EXTRACT'}"
    return label


def _result_detail(result: FileProcessingResult) -> str:
    outcome = result.outcome
    if outcome is ProcessingOutcome.CONFORMING:
        return "already has default stereo AAC"
    if outcome is ProcessingOutcome.REJECTED:
        return f"{result.rejected_codec} video is not supported"
    if outcome is ProcessingOutcome.FAILED:
        detail = result.error_message or "unknown error"
        if result.original_path:
            detail += f" (original kept at {result.original_path.name})"
        return detail

    parts = []
    if result.action:
        parts.append(result.action)
    if result.captions:
        parts.append(f"{len(result.captions)} caption file(s)")
    if result.warnings:
        parts.append(f"{len(result.warnings)} warning(s)")
    return ", ".join(parts) or "nothing to do"


def format_result_line(result: FileProcessingResult) -> str:
    """Format one result as ``[STATUS] name: detail``."""
    return (
        f"[{_status_label(result)}] {result.file_path.name}: "
        f"{_result_detail(result)}"
    )


def format_result_json(result: FileProcessingResult) -> dict[str, Any]:
    """Format one result for JSON output."""
    return {
        "file": str(result.file_path),
        "outcome": result.outcome.value,
        "success": result.success,
        "action": result.action,
        "rejected_codec": result.rejected_codec,
        "output": str(result.output_path) if result.output_path else None,
        "captions": [str(p) for p in result.captions],
        "commands": [list(cmd) for cmd in result.commands],
        "warnings": list(result.warnings),
        "error_type": result.error_type,
        "error_message": result.error_message,
        "original": str(result.original_path) if result.original_path else None,
        "duration_seconds": round(result.duration_seconds, 2),
    }


# =============================================================================
# Argument Handling
# =============================================================================


def _validate_workers(
    ctx: click.Context, param: click.Parameter, value: int | None
) -> int | None:
    """Validate --workers option value.

    Raises:
        click.BadParameter: If value is less than 1.
    """
    if value is not None and value < 1:
        raise click.BadParameter("must be at least 1")
    return value


def _resolve_target(
    path: Path | None,
    directory: Path | None,
    recursive: bool,
    json_output: bool,
) -> Path:
    """Check the single-file / directory mode flags and return the target."""
    if path is not None and directory is not None:
        error_exit(
            "Give either a file PATH or --dir, not both.",
            ExitCode.INVALID_ARGUMENTS,
            json_output,
        )
    if recursive and directory is None:
        error_exit(
            "--recursive can only be used together with --dir.",
            ExitCode.INVALID_ARGUMENTS,
            json_output,
        )
    if path is None and directory is None:
        error_exit(
            "Nothing to process: give a file PATH or --dir DIR.",
            ExitCode.INVALID_ARGUMENTS,
            json_output,
        )

    if directory is not None:
        if directory.exists() and not directory.is_dir():
            error_exit(
                f"--dir expects a directory: {directory}",
                ExitCode.INVALID_ARGUMENTS,
                json_output,
            )
        return directory
    return path


# =============================================================================
# Command
# =============================================================================


@click.command("fix")
@click.argument(
    "path",
    required=False,
    type=click.Path(path_type=Path),
)
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(path_type=Path),
    default=None,
    help="Process every video file in a directory.",
)
@click.option(
    "--recursive",
    "-R",
    is_flag=True,
    default=False,
    help="With --dir, also process subdirectories.",
)
@click.option(
    "--policy",
    "-p",
    "policy_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to YAML policy file (default: from config or built-in).",
)
@click.option(
    "--workers",
    "-w",
    type=int,
    default=None,
    callback=_validate_workers,
    help="Number of files processed in parallel (max: half CPU cores).",
)
@click.option(
    "--dry-run",
    "-n",
    is_flag=True,
    default=False,
    help="Show ffmpeg commands without modifying files.",
)
@click.option(
    "--json",
    "-j",
    "json_output",
    is_flag=True,
    default=False,
    help="Output in JSON format.",
)
def fix_command(
    path: Path | None,
    directory: Path | None,
    recursive: bool,
    policy_path: Path | None,
    workers: int | None,
    dry_run: bool,
    json_output: bool,
) -> None:
    """Make video files play in browsers.

    Ensures a default stereo AAC audio track (changing the default flag,
    downmixing, or transcoding as needed), writes the result as MP4 and
    extracts text subtitles to WebVTT sidecar files.

    Examples:

        streamfix fix movie.mkv

        streamfix fix --dir /media/movies --recursive

        streamfix fix --dry-run --json movie.mkv
    """
    target = _resolve_target(path, directory, recursive, json_output)

    config = get_config()
    policy = resolve_policy(policy_path, config, json_output)

    try:
        file_paths = discover_files(
            target, recursive=recursive and directory is not None
        )
    except (FileNotFoundError, NotADirectoryError) as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
    except OSError as e:
        error_exit(
            f"Cannot read {target}: {e}", ExitCode.GENERAL_ERROR, json_output
        )

    if not file_paths:
        error_exit(
            f"No video files found in {target}.",
            ExitCode.TARGET_NOT_FOUND,
            json_output,
        )

    introspector = build_introspector(config, json_output)
    executor = build_executor(config, policy, dry_run, json_output)
    processor = FileProcessor(introspector, executor, policy)
    effective_workers = resolve_worker_count(workers, config.processing.workers)

    if not json_output:
        click.echo(f"Files: {len(file_paths)}")
        click.echo(f"Mode: {'dry-run' if dry_run else 'live'}")
        click.echo(f"Workers: {effective_workers}")
        click.echo("")

    def on_result(result: FileProcessingResult) -> None:
        if json_output:
            return
        click.echo(format_result_line(result))
        for warning in result.warnings:
            click.echo(f"    warning: {warning}")
        if dry_run:
            for cmd in result.commands:
                click.echo(f"    {' '.join(cmd)}")

    batch_start = time.time()
    try:
        results = process_files(
            file_paths, processor, workers=effective_workers, on_result=on_result
        )
    except KeyboardInterrupt:
        error_exit("Interrupted", ExitCode.INTERRUPTED, json_output)
    batch_duration = time.time() - batch_start

    counts = {outcome: 0 for outcome in ProcessingOutcome}
    for result in results:
        counts[result.outcome] += 1
    failed = counts[ProcessingOutcome.FAILED]

    if json_output:
        output = {
            "dry_run": dry_run,
            "workers": effective_workers,
            "summary": {
                "total": len(results),
                **{outcome.value: counts[outcome] for outcome in ProcessingOutcome},
                "duration_seconds": round(batch_duration, 2),
            },
            "results": [format_result_json(r) for r in results],
        }
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo("")
        click.echo(
            f"Processed {len(results)} file(s): "
            f"{counts[ProcessingOutcome.REMEDIATED]} fixed, "
            f"{counts[ProcessingOutcome.SUBTITLES_ONLY]} captions only, "
            f"{counts[ProcessingOutcome.CONFORMING]} ok, "
            f"{counts[ProcessingOutcome.UNCHANGED]} unchanged, "
            f"{counts[ProcessingOutcome.REJECTED]} skipped, "
            f"{failed} failed in {batch_duration:.1f}s"
        )

    if failed:
        sys.exit(ExitCode.OPERATION_FAILED)
    sys.exit(ExitCode.SUCCESS)
