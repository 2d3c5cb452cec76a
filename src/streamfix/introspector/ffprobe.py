"""FFprobe-based implementation of the MediaIntrospector protocol."""

import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from streamfix.domain import ProbeResult
from streamfix.introspector.interface import MediaIntrospectionError
from streamfix.introspector.parsers import parse_ffprobe_output

logger = logging.getLogger(__name__)


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaIntrospector protocol.

    Resolves ffprobe from the streamfix configuration or PATH.
    """

    DEFAULT_TIMEOUT: int = 60

    def __init__(
        self,
        ffprobe_path: Path | None = None,
        timeout: int | None = None,
    ) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. If not provided,
                uses the configured path or the one found on PATH.
            timeout: Seconds to wait for ffprobe. None uses DEFAULT_TIMEOUT.

        Raises:
            ToolNotFoundError: If ffprobe is not available.
        """
        if ffprobe_path is None:
            from streamfix.executor.interface import require_tool

            ffprobe_path = require_tool("ffprobe")
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT

    def probe(self, path: Path) -> ProbeResult:
        """Extract stream metadata from a media file.

        Args:
            path: Path to the media file.

        Returns:
            ProbeResult with the file's streams.

        Raises:
            MediaIntrospectionError: If ffprobe cannot run or fails.
            ParseError: If ffprobe's output is malformed.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        cmd = [
            str(self._ffprobe_path),
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_streams",
            str(path),
        ]
        logger.debug("Probing %s", path)

        try:
            result = subprocess.run(  # nosec B603 - ffprobe path is resolved
                cmd,
                capture_output=True,
                text=True,
                errors="replace",  # Handle non-UTF8 tag values
                check=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            raise MediaIntrospectionError(
                f"ffprobe failed for {path}: {(e.stderr or '').strip() or e}"
            ) from e
        except OSError as e:
            raise MediaIntrospectionError(
                f"Could not run ffprobe for {path}: {e}"
            ) from e

        return parse_ffprobe_output(result.stdout, path)
