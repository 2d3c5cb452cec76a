"""Executor result type and external tool resolution."""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from streamfix.exceptions import ToolNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutorResult:
    """Result of an executor operation."""

    success: bool
    """True if the operation succeeded (or would, in dry-run mode)."""

    message: str = ""
    """Human-readable message describing the result."""

    output_path: Path | None = None
    """File written by the operation."""

    command: tuple[str, ...] = field(default_factory=tuple)
    """The ffmpeg argv that was (or would be) run."""


def get_tool_path(tool_name: str) -> Path | None:
    """Get path to a tool, or None if not available.

    A path configured via STREAMFIX_<TOOL>_PATH or [tools] wins over PATH.

    Args:
        tool_name: "ffmpeg" or "ffprobe".

    Returns:
        Path to the tool or None if not available.
    """
    from streamfix.config import get_config

    configured: Path | None = getattr(get_config().tools, tool_name, None)
    if configured is not None:
        if configured.exists():
            return configured
        logger.warning(
            "Configured %s path does not exist: %s, falling back to PATH",
            tool_name,
            configured,
        )

    found = shutil.which(tool_name)
    return Path(found) if found else None


def require_tool(tool_name: str) -> Path:
    """Get path to a required tool, raising an error if not available.

    Args:
        tool_name: "ffmpeg" or "ffprobe".

    Returns:
        Path to the tool executable.

    Raises:
        ToolNotFoundError: If the tool is not available.
    """
    path = get_tool_path(tool_name)
    if path is None:
        raise ToolNotFoundError(tool_name)
    return path
