"""Error taxonomy for streamfix.

Every per-file error raised while probing, classifying or remediating a
file derives from StreamfixError so the workflow can catch it at the
batch boundary and carry on with the remaining files.
"""

from pathlib import Path


class StreamfixError(Exception):
    """Base exception for streamfix errors."""

    pass


class ParseError(StreamfixError):
    """Raised when probe output or a numeric probe field is malformed.

    Always raised before any file is renamed.
    """

    def __init__(self, message: str, file_path: Path | None = None) -> None:
        """Initialize parse error.

        Args:
            message: Human-readable error description.
            file_path: File whose probe data could not be parsed.
        """
        self.message = message
        self.file_path = file_path
        super().__init__(message)


class ExecutionError(StreamfixError):
    """Raised when ffmpeg fails or times out.

    When raised during audio remediation the source has already been moved
    aside, so ``original_path`` points at the ``.original`` copy that is
    kept for manual recovery.
    """

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stderr_tail: str = "",
        original_path: Path | None = None,
    ) -> None:
        """Initialize execution error.

        Args:
            message: Human-readable error description.
            returncode: ffmpeg exit status, -1 on timeout, None if it never ran.
            stderr_tail: Last lines of ffmpeg's diagnostic output.
            original_path: Path of the preserved pre-remediation file.
        """
        self.message = message
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        self.original_path = original_path
        super().__init__(message)


class FilesystemError(StreamfixError):
    """Raised when a rename or remove around remediation fails."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        """Initialize filesystem error.

        Args:
            message: Human-readable error description.
            path: Path the failed operation targeted.
        """
        self.message = message
        self.path = path
        super().__init__(message)


class ToolNotFoundError(StreamfixError):
    """Raised when ffmpeg or ffprobe cannot be located."""

    def __init__(self, tool_name: str) -> None:
        """Initialize tool not found error.

        Args:
            tool_name: Name of the missing executable.
        """
        self.tool_name = tool_name
        message = (
            f"Required tool not available: {tool_name}. "
            f"Install ffmpeg or set STREAMFIX_{tool_name.upper()}_PATH "
            "or [tools] in ~/.streamfix/config.toml"
        )
        super().__init__(message)
