"""Setup helpers shared by the fix and inspect commands.

Each helper turns setup failures into an error_exit with the matching
exit code, so commands can stay linear.
"""

import logging
from pathlib import Path

from streamfix.cli.exit_codes import ExitCode
from streamfix.cli.output import error_exit, warning_output
from streamfix.config import StreamfixConfig
from streamfix.exceptions import ToolNotFoundError
from streamfix.executor import FFmpegExecutor, get_tool_path, require_tool
from streamfix.introspector import FFprobeIntrospector
from streamfix.policy import (
    DEFAULT_POLICY,
    PolicyValidationError,
    RemediationPolicy,
    load_policy,
)

logger = logging.getLogger(__name__)


def resolve_policy(
    policy_path: Path | None,
    config: StreamfixConfig,
    json_output: bool,
) -> RemediationPolicy:
    """Load the policy from --policy, the configured file, or defaults."""
    if policy_path is None:
        policy_path = config.policy_file
    if policy_path is None:
        return DEFAULT_POLICY

    policy_path = policy_path.expanduser().resolve()
    try:
        policy = load_policy(policy_path)
    except FileNotFoundError:
        error_exit(
            f"Policy file not found: {policy_path}",
            ExitCode.POLICY_VALIDATION_ERROR,
            json_output,
        )
    except PolicyValidationError as e:
        error_exit(str(e), ExitCode.POLICY_VALIDATION_ERROR, json_output)

    logger.info("Using policy %s", policy_path)
    return policy


def build_introspector(
    config: StreamfixConfig, json_output: bool
) -> FFprobeIntrospector:
    """Create the ffprobe introspector or exit if ffprobe is missing."""
    try:
        return FFprobeIntrospector(timeout=config.processing.probe_timeout_seconds)
    except ToolNotFoundError as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE, json_output)


def build_executor(
    config: StreamfixConfig,
    policy: RemediationPolicy,
    dry_run: bool,
    json_output: bool,
) -> FFmpegExecutor:
    """Create the ffmpeg executor.

    ffmpeg must be resolvable up front for live runs; dry runs only print
    commands and tolerate a missing binary.
    """
    if dry_run:
        ffmpeg_path = get_tool_path("ffmpeg")
        if ffmpeg_path is None:
            warning_output("ffmpeg not found; a live run would fail", json_output)
    else:
        try:
            ffmpeg_path = require_tool("ffmpeg")
        except ToolNotFoundError as e:
            error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE, json_output)

    return FFmpegExecutor(
        ffmpeg_path=ffmpeg_path,
        timeout=config.processing.timeout_seconds,
        launch_retries=config.processing.launch_retries,
        retry_delay=config.processing.retry_delay_seconds,
        dry_run=dry_run,
        policy=policy,
    )
