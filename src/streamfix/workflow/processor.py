"""Per-file remediation pipeline.

probe -> classify -> subtitle extractions -> audio remediation.

Subtitles are extracted before the audio rename so they always read the
untouched source, and a failed extraction never blocks the audio fix.
Every per-file error is turned into a FAILED result here so a batch can
keep going.
"""

import logging
import time
from pathlib import Path

from streamfix.exceptions import ExecutionError, FilesystemError, StreamfixError
from streamfix.executor.command import remediation_output_path, subtitle_output_paths
from streamfix.executor.ffmpeg import FFmpegExecutor
from streamfix.introspector.interface import MediaIntrospector
from streamfix.policy.classifier import classify
from streamfix.policy.models import DEFAULT_POLICY, RemediationPolicy
from streamfix.policy.types import Classification, EarlyExit, RejectedCodec
from streamfix.workflow.types import FileProcessingResult, ProcessingOutcome

logger = logging.getLogger(__name__)


class FileProcessor:
    """Runs the remediation pipeline for one file at a time.

    Holds no per-file state, so one instance can be shared by workers.
    """

    def __init__(
        self,
        introspector: MediaIntrospector,
        executor: FFmpegExecutor,
        policy: RemediationPolicy = DEFAULT_POLICY,
    ) -> None:
        self.introspector = introspector
        self.executor = executor
        self.policy = policy

    def process_file(self, path: Path) -> FileProcessingResult:
        """Probe, classify and remediate a single file.

        Args:
            path: Media file to process.

        Returns:
            FileProcessingResult describing the outcome. Never raises for
            per-file errors.
        """
        start = time.monotonic()
        dry_run = self.executor.dry_run

        def done(outcome: ProcessingOutcome, **kwargs) -> FileProcessingResult:
            return FileProcessingResult(
                file_path=path,
                outcome=outcome,
                dry_run=dry_run,
                duration_seconds=time.monotonic() - start,
                **kwargs,
            )

        try:
            probe = self.introspector.probe(path)
            result = classify(probe.streams, self.policy)
        except StreamfixError as e:
            logger.error("Could not classify %s: %s", path, e)
            return done(
                ProcessingOutcome.FAILED,
                error_message=str(e),
                error_type=type(e).__name__,
            )

        if isinstance(result, RejectedCodec):
            logger.warning(
                "Skipping %s: %s video is not supported", path, result.codec_name
            )
            return done(ProcessingOutcome.REJECTED, rejected_codec=result.codec_name)

        if isinstance(result, EarlyExit):
            logger.info("%s meets requirements, nothing to do", path)
            return done(ProcessingOutcome.CONFORMING)

        return self._remediate(path, result, done)

    def _remediate(self, path: Path, classification: Classification, done):
        captions: list[Path] = []
        commands: list[tuple[str, ...]] = []
        warnings: list[str] = []

        caption_paths = subtitle_output_paths(
            path, classification.subtitle_extractions, self.policy.caption_extension
        )
        for extraction, caption_path in zip(
            classification.subtitle_extractions, caption_paths
        ):
            try:
                sub_result = self.executor.extract_subtitle(
                    extraction, path, caption_path
                )
            except (ExecutionError, FilesystemError) as e:
                message = f"Subtitle s:{extraction.subtitle_index} failed: {e}"
                logger.warning("%s: %s", path, message)
                warnings.append(message)
                continue
            captions.append(caption_path)
            commands.append(sub_result.command)

        action = classification.audio_action
        if action is None:
            outcome = (
                ProcessingOutcome.SUBTITLES_ONLY
                if captions
                else ProcessingOutcome.UNCHANGED
            )
            if outcome is ProcessingOutcome.UNCHANGED:
                logger.info("%s: no audio remediation needed", path)
            return done(
                outcome,
                captions=tuple(captions),
                commands=tuple(commands),
                warnings=tuple(warnings),
            )

        dest = remediation_output_path(path, self.policy.output_extension)
        try:
            exec_result = self.executor.execute(
                action, classification.total_audio_streams, path, dest
            )
        except ExecutionError as e:
            return done(
                ProcessingOutcome.FAILED,
                action=action.name,
                captions=tuple(captions),
                commands=tuple(commands),
                warnings=tuple(warnings),
                error_message=str(e),
                error_type=type(e).__name__,
                original_path=e.original_path,
            )
        except FilesystemError as e:
            logger.error("Filesystem error on %s: %s", path, e)
            return done(
                ProcessingOutcome.FAILED,
                action=action.name,
                captions=tuple(captions),
                commands=tuple(commands),
                warnings=tuple(warnings),
                error_message=str(e),
                error_type=type(e).__name__,
            )

        commands.append(exec_result.command)
        logger.info("%s: %s -> %s", path, exec_result.message, dest.name)
        return done(
            ProcessingOutcome.REMEDIATED,
            action=action.name,
            output_path=dest,
            captions=tuple(captions),
            commands=tuple(commands),
            warnings=tuple(warnings),
        )
