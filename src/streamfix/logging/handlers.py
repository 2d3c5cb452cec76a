"""JSON log formatting for streamfix.

One JSON object per line, so a batch log can be filtered per file with
e.g. ``jq 'select(.file_id == "F03")'``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has, plus the ones added while formatting or
# by WorkerContextFilter. Anything else on a record came from ``extra=``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
).union(
    {"message", "asctime", "taskName"},
    {"worker_id", "file_id", "file_path", "worker_tag"},
)


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Top-level keys: ``timestamp`` (ISO-8601 UTC), ``level``, ``logger``,
    ``message``; inside a worker context also ``worker``, ``file_id`` and
    ``file``. Values passed via ``extra=`` (e.g. the ffmpeg exit code on a
    failed remux) are grouped under ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        worker_id = getattr(record, "worker_id", None)
        if worker_id:
            entry["worker"] = f"W{worker_id}"
            entry["file_id"] = getattr(record, "file_id", None)
            entry["file"] = getattr(record, "file_path", None)

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
