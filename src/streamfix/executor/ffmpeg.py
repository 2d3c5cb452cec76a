"""FFmpeg executor for audio remediation and subtitle extraction.

Audio remediation follows a rename-in-place pattern:

1. ``<file>`` is renamed to ``<file>.original`` so ffmpeg never reads and
   writes the same path
2. ffmpeg reads the ``.original`` and writes the destination
3. on success the ``.original`` is removed; on failure it is kept for
   manual recovery and any partial destination is deleted
"""

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg execution
import time
from pathlib import Path

from streamfix.exceptions import ExecutionError, FilesystemError
from streamfix.executor.command import (
    FFmpegInvocation,
    build_audio_command,
    build_subtitle_command,
)
from streamfix.executor.interface import ExecutorResult, require_tool
from streamfix.policy.models import DEFAULT_POLICY, RemediationPolicy
from streamfix.policy.types import AudioAction, SubtitleExtraction

logger = logging.getLogger(__name__)

ORIGINAL_SUFFIX = ".original"

# Lines of ffmpeg stderr kept on ExecutionError
STDERR_TAIL_LINES = 20


def original_path_for(path: Path) -> Path:
    """Return the temporary ``<path>.original`` name used during remediation."""
    return path.with_name(path.name + ORIGINAL_SUFFIX)


def _tail(text: str, lines: int = STDERR_TAIL_LINES) -> str:
    return "\n".join(text.strip().splitlines()[-lines:])


class FFmpegExecutor:
    """Runs remediation and subtitle commands through ffmpeg.

    Process launch failures (ffmpeg could not be started) are retried with
    a linear back-off. Failures reported by ffmpeg itself are not retried.
    """

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        timeout: int | None = None,
        launch_retries: int = 2,
        retry_delay: float = 1.0,
        dry_run: bool = False,
        policy: RemediationPolicy = DEFAULT_POLICY,
    ) -> None:
        """Initialize the executor.

        Args:
            ffmpeg_path: Explicit ffmpeg path. None resolves it lazily from
                configuration or PATH.
            timeout: Seconds before ffmpeg is killed. None or 0 means no limit.
            launch_retries: Extra attempts when ffmpeg cannot be launched.
            retry_delay: Base delay in seconds between launch attempts.
            dry_run: Build and log commands without running them.
            policy: Remediation policy (caption codec).
        """
        self._tool_path = ffmpeg_path
        self._timeout = timeout or None
        self._launch_retries = launch_retries
        self._retry_delay = retry_delay
        self.dry_run = dry_run
        self.policy = policy

    @property
    def tool_path(self) -> Path:
        """Get path to ffmpeg, verifying availability.

        Raises:
            ToolNotFoundError: If ffmpeg is not available.
        """
        if self._tool_path is None:
            self._tool_path = require_tool("ffmpeg")
        return self._tool_path

    def execute(
        self,
        action: AudioAction,
        total_audio_streams: int,
        source_file: Path,
        dest_file: Path,
    ) -> ExecutorResult:
        """Apply an audio remediation action.

        Args:
            action: Audio action from classification.
            total_audio_streams: Number of audio streams in the source.
            source_file: File to remediate.
            dest_file: Output path (usually the source with the output
                container extension).

        Returns:
            ExecutorResult describing the change.

        Raises:
            FilesystemError: If the destination or a stale ``.original``
                already exists, or a rename/remove fails.
            ExecutionError: If ffmpeg fails. The ``.original`` is kept and
                its path is set on the error.
        """
        original = original_path_for(source_file)
        invocation = build_audio_command(
            action, total_audio_streams, original, dest_file
        )
        command = tuple(invocation.to_args(self._display_tool()))

        if original.exists():
            raise FilesystemError(
                f"{original} already exists; a previous run may need manual "
                "recovery",
                original,
            )
        if dest_file != source_file and dest_file.exists():
            raise FilesystemError(
                f"Output {dest_file} already exists, refusing to overwrite",
                dest_file,
            )

        if self.dry_run:
            logger.info("[dry-run] %s: %s", action.name, invocation.describe())
            return ExecutorResult(
                success=True,
                message=f"Would apply {action.name}",
                output_path=dest_file,
                command=command,
            )

        logger.info("Applying %s to %s", action.name, source_file)
        try:
            source_file.rename(original)
        except OSError as e:
            raise FilesystemError(
                f"Could not rename {source_file} to {original}: {e}", source_file
            ) from e

        try:
            self._run(invocation, action.name)
        except ExecutionError as e:
            e.original_path = original
            self._remove_partial(dest_file)
            logger.error(
                "%s failed for %s; original kept at %s",
                action.name,
                source_file,
                original,
                extra={
                    "action": action.name,
                    "returncode": e.returncode,
                    "original_path": str(original),
                },
            )
            raise

        try:
            original.unlink()
        except OSError as e:
            raise FilesystemError(
                f"Wrote {dest_file} but could not remove {original}: {e}", original
            ) from e

        return ExecutorResult(
            success=True,
            message=f"Applied {action.name}",
            output_path=dest_file,
            command=command,
        )

    def extract_subtitle(
        self,
        extraction: SubtitleExtraction,
        source_file: Path,
        output_file: Path,
    ) -> ExecutorResult:
        """Extract one subtitle stream to a sidecar caption file.

        Args:
            extraction: Subtitle stream to extract.
            source_file: Media file to read.
            output_file: Caption file to write (overwritten if present).

        Returns:
            ExecutorResult with the caption path.

        Raises:
            ExecutionError: If ffmpeg fails.
        """
        invocation = build_subtitle_command(
            extraction, source_file, output_file, self.policy.caption_codec
        )
        command = tuple(invocation.to_args(self._display_tool()))

        if self.dry_run:
            logger.info("[dry-run] subtitle: %s", invocation.describe())
            return ExecutorResult(
                success=True,
                message=f"Would extract {output_file.name}",
                output_path=output_file,
                command=command,
            )

        logger.info(
            "Extracting subtitle s:%d (%s) to %s",
            extraction.subtitle_index,
            extraction.language,
            output_file.name,
        )
        try:
            self._run(invocation, f"subtitle s:{extraction.subtitle_index}")
        except ExecutionError:
            self._remove_partial(output_file)
            raise

        return ExecutorResult(
            success=True,
            message=f"Extracted {output_file.name}",
            output_path=output_file,
            command=command,
        )

    def _display_tool(self) -> Path | str:
        # Dry runs should not fail just because ffmpeg is missing
        if self.dry_run and self._tool_path is None:
            return "ffmpeg"
        return self.tool_path

    def _run(self, invocation: FFmpegInvocation, description: str) -> None:
        """Run ffmpeg, retrying only when the process cannot be launched.

        Raises:
            ExecutionError: On launch failure after all retries, timeout or
                non-zero exit.
        """
        cmd = invocation.to_args(self.tool_path)
        attempts = self._launch_retries + 1

        for attempt in range(1, attempts + 1):
            logger.debug("Running %s (attempt %d): %s", description, attempt, cmd)
            try:
                result = subprocess.run(  # nosec B603 - argv built from plan
                    cmd,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=self._timeout,
                )
            except subprocess.TimeoutExpired as e:
                raise ExecutionError(
                    f"ffmpeg {description} timed out after {e.timeout}s",
                    returncode=-1,
                ) from e
            except OSError as e:
                if attempt < attempts:
                    delay = self._retry_delay * attempt
                    logger.warning(
                        "Could not launch ffmpeg for %s (%s), retrying in %.1fs",
                        description,
                        e,
                        delay,
                    )
                    time.sleep(delay)
                    continue
                raise ExecutionError(
                    f"Could not launch ffmpeg for {description} "
                    f"after {attempts} attempt(s): {e}"
                ) from e

            if result.returncode != 0:
                stderr_tail = _tail(result.stderr or "")
                last_line = stderr_tail.splitlines()[-1] if stderr_tail else "no output"
                raise ExecutionError(
                    f"ffmpeg {description} exited with status "
                    f"{result.returncode}: {last_line}",
                    returncode=result.returncode,
                    stderr_tail=stderr_tail,
                )
            return

    @staticmethod
    def _remove_partial(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove partial output %s: %s", path, e)
