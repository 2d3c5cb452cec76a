"""Remediation workflow: discovery, per-file pipeline and batch driver."""

from streamfix.workflow.batch import (
    find_output_conflicts,
    get_max_workers,
    process_files,
    resolve_worker_count,
)
from streamfix.workflow.discovery import DEFAULT_EXTENSIONS, discover_files
from streamfix.workflow.processor import FileProcessor
from streamfix.workflow.types import FileProcessingResult, ProcessingOutcome

__all__ = [
    "DEFAULT_EXTENSIONS",
    "FileProcessingResult",
    "FileProcessor",
    "ProcessingOutcome",
    "discover_files",
    "find_output_conflicts",
    "get_max_workers",
    "process_files",
    "resolve_worker_count",
]
