"""MediaIntrospector interface for stream metadata extraction."""

from pathlib import Path
from typing import Protocol

from streamfix.domain import ProbeResult
from streamfix.exceptions import StreamfixError


class MediaIntrospectionError(StreamfixError):
    """Raised when media introspection fails."""

    pass


class MediaIntrospector(Protocol):
    """Protocol for media introspection implementations.

    The workflow only depends on this protocol so tests can hand it canned
    probe results instead of running ffprobe.
    """

    def probe(self, path: Path) -> ProbeResult:
        """Extract stream metadata from a media file.

        Args:
            path: Path to the media file.

        Returns:
            ProbeResult with the file's streams in container order.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
            ParseError: If the prober's output is malformed.
        """
        ...
