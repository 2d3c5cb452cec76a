"""Configuration data models.

This module defines dataclasses for streamfix configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class ProcessingConfig:
    """Configuration for batch processing and ffmpeg invocation."""

    # Parallel files in directory mode (1 = sequential)
    workers: int = 1

    # Seconds before an ffmpeg run is killed (0 = no timeout)
    timeout_seconds: int = 0

    # Extra attempts when ffmpeg cannot be launched at all
    launch_retries: int = 2

    # Seconds to wait between launch attempts (multiplied by attempt number)
    retry_delay_seconds: float = 1.0

    # Seconds before ffprobe is killed
    probe_timeout_seconds: int = 60

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.timeout_seconds < 0:
            raise ValueError(
                f"timeout_seconds must be >= 0, got {self.timeout_seconds}"
            )
        if self.launch_retries < 0:
            raise ValueError(
                f"launch_retries must be >= 0, got {self.launch_retries}"
            )
        if self.probe_timeout_seconds < 1:
            raise ValueError(
                "probe_timeout_seconds must be at least 1, "
                f"got {self.probe_timeout_seconds}"
            )


@dataclass
class StreamfixConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)

    # Default policy file applied when --policy is not given
    policy_file: Path | None = None
