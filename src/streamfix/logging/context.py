"""Worker context for structured logging.

Uses contextvars so every record logged while a file is being processed
carries the worker and file identifiers, also under the thread pool.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_worker_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "worker_id", default=None
)
_file_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_id", default=None
)
_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)


@contextmanager
def worker_context(
    worker_id: str,
    file_id: str | None = None,
    file_path: Path | str | None = None,
) -> Generator[None, None, None]:
    """Context manager for worker processing context.

    Args:
        worker_id: Worker identifier (e.g., "01").
        file_id: File identifier (e.g., "F001").
        file_path: Full path to file being processed.

    Example:
        with worker_context("01", "F001", "/path/to/file.mkv"):
            logger.info("Processing file")  # Tagged [W01:F001]
    """
    tokens = (
        _worker_id.set(worker_id),
        _file_id.set(file_id),
        _file_path.set(str(file_path) if file_path is not None else None),
    )
    try:
        yield
    finally:
        _file_path.reset(tokens[2])
        _file_id.reset(tokens[1])
        _worker_id.reset(tokens[0])


def get_worker_context() -> tuple[str | None, str | None, str | None]:
    """Get current worker context as (worker_id, file_id, file_path)."""
    return _worker_id.get(), _file_id.get(), _file_path.get()


class WorkerContextFilter(logging.Filter):
    """Logging filter that injects worker context into log records.

    Adds worker_id, file_id and file_path for JSON output and a compact
    worker_tag such as ``[W01:F001] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject worker context into log record. Never drops records."""
        worker_id, file_id, file_path = get_worker_context()

        record.worker_id = worker_id
        record.file_id = file_id
        record.file_path = file_path

        if worker_id:
            if file_id:
                record.worker_tag = f"[W{worker_id}:{file_id}] "
            else:
                record.worker_tag = f"[W{worker_id}] "
        else:
            record.worker_tag = ""

        return True
