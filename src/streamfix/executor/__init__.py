"""Execution layer for streamfix.

- command: pure ffmpeg command construction per remediation action
- ffmpeg: FFmpegExecutor (rename-in-place remediation, subtitle extraction)
- interface: ExecutorResult and tool path resolution
"""

from streamfix.executor.command import (
    FFmpegInvocation,
    build_audio_command,
    build_downmix_command,
    build_fix_disposition_command,
    build_subtitle_command,
    build_transcode_command,
    remediation_output_path,
    subtitle_output_path,
    subtitle_output_paths,
)
from streamfix.executor.ffmpeg import (
    ORIGINAL_SUFFIX,
    FFmpegExecutor,
    original_path_for,
)
from streamfix.executor.interface import ExecutorResult, get_tool_path, require_tool

__all__ = [
    "ExecutorResult",
    "FFmpegExecutor",
    "FFmpegInvocation",
    "ORIGINAL_SUFFIX",
    "build_audio_command",
    "build_downmix_command",
    "build_fix_disposition_command",
    "build_subtitle_command",
    "build_transcode_command",
    "get_tool_path",
    "original_path_for",
    "remediation_output_path",
    "require_tool",
    "subtitle_output_path",
    "subtitle_output_paths",
]
