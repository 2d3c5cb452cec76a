"""Batch processing over many files, sequentially or on a worker pool."""

import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from streamfix.exceptions import FilesystemError
from streamfix.executor.command import remediation_output_path
from streamfix.logging import worker_context
from streamfix.workflow.processor import FileProcessor
from streamfix.workflow.types import FileProcessingResult, ProcessingOutcome

logger = logging.getLogger(__name__)

ResultCallback = Callable[[FileProcessingResult], None]


def get_max_workers() -> int:
    """Calculate maximum worker count (half CPU cores, minimum 1)."""
    cpu_count = os.cpu_count() or 2
    return max(1, cpu_count // 2)


def resolve_worker_count(requested: int | None, config_default: int) -> int:
    """Resolve effective worker count with capping.

    Args:
        requested: Worker count from CLI (None if not specified).
        config_default: Default worker count from configuration.

    Returns:
        Effective worker count (capped at get_max_workers()).
    """
    max_workers = get_max_workers()
    effective = requested if requested is not None else config_default

    if effective > max_workers:
        logger.warning(
            "Requested %d workers exceeds cap of %d (half of %s cores). Using %d.",
            effective,
            max_workers,
            os.cpu_count(),
            max_workers,
        )
        return max_workers

    return max(1, effective)


def _run_one(
    processor: FileProcessor,
    path: Path,
    worker_id: str,
    file_id: str,
) -> FileProcessingResult:
    with worker_context(worker_id, file_id, path):
        logger.info("=== FILE %s: %s", file_id, path)
        try:
            return processor.process_file(path)
        except Exception as e:
            # Last line of defence: one bad file must not sink the batch
            logger.exception("Unexpected error processing %s", path)
            return FileProcessingResult(
                file_path=path,
                outcome=ProcessingOutcome.FAILED,
                error_message=str(e),
                error_type=type(e).__name__,
                dry_run=processor.executor.dry_run,
            )


def find_output_conflicts(
    paths: Sequence[Path], output_extension: str
) -> dict[int, Path]:
    """Find files whose outputs are already claimed by an earlier file.

    ``movie.avi`` and ``movie.mkv`` both remediate to ``movie.mp4`` and
    write the same caption sidecars, so only the first of them may run.

    Returns:
        Position of each losing path mapped to the path that owns its
        output name.
    """
    owners: dict[Path, int] = {}
    conflicts: dict[int, Path] = {}
    for pos, path in enumerate(paths):
        output = remediation_output_path(path, output_extension)
        owner = owners.setdefault(output, pos)
        if owner != pos:
            conflicts[pos] = paths[owner]
    return conflicts


def _conflict_result(
    path: Path, owner: Path, processor: FileProcessor
) -> FileProcessingResult:
    output = remediation_output_path(path, processor.policy.output_extension)
    message = (
        f"{output.name} is also the output of {owner.name}; "
        "rename one of them and run again"
    )
    logger.error("Skipping %s: %s", path, message)
    return FileProcessingResult(
        file_path=path,
        outcome=ProcessingOutcome.FAILED,
        error_message=message,
        error_type=FilesystemError.__name__,
        dry_run=processor.executor.dry_run,
    )


def process_files(
    paths: Sequence[Path],
    processor: FileProcessor,
    workers: int = 1,
    on_result: ResultCallback | None = None,
) -> list[FileProcessingResult]:
    """Process files and return their results in input order.

    Files sharing an output name with an earlier file are failed up front
    without being probed, so no two pipelines ever write the same path.

    Args:
        paths: Files to process.
        processor: Pipeline shared by all workers.
        workers: Number of files processed concurrently (1 = sequential).
        on_result: Called with each result as soon as it is available.

    Returns:
        One FileProcessingResult per input path, in input order.
    """
    file_id_width = len(str(len(paths)))
    ids = [
        (f"{(i % workers) + 1:02d}", f"F{i + 1:0{file_id_width}d}")
        for i in range(len(paths))
    ]

    ordered: list[FileProcessingResult | None] = [None] * len(paths)
    conflicts = find_output_conflicts(paths, processor.policy.output_extension)
    for pos, owner in conflicts.items():
        ordered[pos] = _conflict_result(paths[pos], owner, processor)
        if on_result:
            on_result(ordered[pos])

    pending = [
        (pos, path, worker_id, file_id)
        for pos, (path, (worker_id, file_id)) in enumerate(zip(paths, ids))
        if pos not in conflicts
    ]

    if workers <= 1:
        for pos, path, worker_id, file_id in pending:
            result = _run_one(processor, path, worker_id, file_id)
            if on_result:
                on_result(result)
            ordered[pos] = result
        return [r for r in ordered if r is not None]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(_run_one, processor, path, worker_id, file_id): pos
            for pos, path, worker_id, file_id in pending
        }
        try:
            for future in as_completed(futures):
                result = future.result()
                ordered[futures[future]] = result
                if on_result:
                    on_result(result)
        except KeyboardInterrupt:
            logger.warning("Interrupted - waiting for active workers to finish")
            pool.shutdown(wait=True, cancel_futures=True)
            raise

    return [r for r in ordered if r is not None]
