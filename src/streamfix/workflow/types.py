"""Per-file processing result types."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ProcessingOutcome(str, Enum):
    """What happened to a file."""

    CONFORMING = "conforming"  # Already had default stereo AAC
    REJECTED = "rejected"  # Video codec outside the allowed set
    REMEDIATED = "remediated"  # Audio fixed (captions possibly written too)
    SUBTITLES_ONLY = "subtitles_only"  # No audio action, captions written
    UNCHANGED = "unchanged"  # Nothing to do
    FAILED = "failed"

    @property
    def is_failure(self) -> bool:
        return self is ProcessingOutcome.FAILED


@dataclass(frozen=True)
class FileProcessingResult:
    """Result from processing one file."""

    file_path: Path
    outcome: ProcessingOutcome

    action: str | None = None
    """Name of the audio action chosen, if any."""

    rejected_codec: str | None = None
    """Video codec that caused a rejection."""

    output_path: Path | None = None
    """Remediated file (may differ from file_path by extension)."""

    captions: tuple[Path, ...] = ()
    """Sidecar caption files written (or planned in dry-run mode)."""

    commands: tuple[tuple[str, ...], ...] = ()
    """ffmpeg argv lists run (or planned) for this file."""

    warnings: tuple[str, ...] = field(default_factory=tuple)
    """Non-fatal problems, e.g. failed subtitle extractions."""

    error_message: str | None = None
    error_type: str | None = None

    original_path: Path | None = None
    """Preserved ``.original`` file left behind by a failed remediation."""

    dry_run: bool = False
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return not self.outcome.is_failure
