"""Structured logging module for streamfix.

Provides configurable logging with JSON format support and file rotation,
plus worker context tagging for parallel processing.
"""

from streamfix.logging.config import configure_logging
from streamfix.logging.context import (
    WorkerContextFilter,
    get_worker_context,
    worker_context,
)
from streamfix.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "WorkerContextFilter",
    "configure_logging",
    "get_worker_context",
    "worker_context",
]
