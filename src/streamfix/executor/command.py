"""FFmpeg command construction for remediation actions.

Pure functions: each builder turns a classification action into an
FFmpegInvocation without touching the filesystem. Stream selectors are
0-based ordinals within their type (``0:a:1`` is the second audio stream).
"""

import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from streamfix.policy.models import DEFAULT_POLICY
from streamfix.policy.types import (
    AudioAction,
    DownmixToStereo,
    FixDisposition,
    SubtitleExtraction,
    TranscodeToAac,
)

TARGET_AUDIO_CODEC = "aac"
TARGET_CHANNELS = 2


@dataclass(frozen=True)
class FFmpegInvocation:
    """A fully specified ffmpeg run: input, stream maps, options, output."""

    input_path: Path
    stream_maps: tuple[str, ...]
    options: tuple[tuple[str, str], ...]
    output_path: Path
    global_args: tuple[str, ...] = field(
        default=("-hide_banner", "-nostdin", "-y")
    )

    def to_args(self, ffmpeg_path: Path | str = "ffmpeg") -> list[str]:
        """Render the invocation as an argv list.

        Args:
            ffmpeg_path: ffmpeg executable to put in argv[0].

        Returns:
            List of command line arguments.
        """
        args = [str(ffmpeg_path), *self.global_args, "-i", str(self.input_path)]
        for selector in self.stream_maps:
            args.extend(["-map", selector])
        for key, value in self.options:
            args.extend([f"-{key}", value])
        args.append(str(self.output_path))
        return args

    def describe(self, ffmpeg_path: Path | str = "ffmpeg") -> str:
        """Return the command as a copy-pasteable shell string."""
        return shlex.join(self.to_args(ffmpeg_path))


def _check_target(target_index: int, total_audio_streams: int) -> None:
    if not 0 <= target_index < total_audio_streams:
        raise ValueError(
            f"Audio target a:{target_index} out of range for "
            f"{total_audio_streams} audio stream(s)"
        )


def remediation_output_path(
    path: Path, extension: str = DEFAULT_POLICY.output_extension
) -> Path:
    """Return ``<dir>/<stem>.<extension>`` for a remediated file."""
    return path.with_suffix(f".{extension}")


def subtitle_output_path(
    video_path: Path,
    extraction: SubtitleExtraction,
    extension: str = DEFAULT_POLICY.caption_extension,
) -> Path:
    """Return ``<dir>/<stem>.<language>[.<tag>].<extension>``."""
    parts = [video_path.stem, extraction.language]
    if extraction.custom_tag:
        parts.append(extraction.custom_tag)
    parts.append(extension)
    return video_path.with_name(".".join(parts))


def subtitle_output_paths(
    video_path: Path,
    extractions: Sequence[SubtitleExtraction],
    extension: str = DEFAULT_POLICY.caption_extension,
) -> list[Path]:
    """Return one sidecar path per extraction, unique within the file.

    The first extraction for a language/tag pair gets the plain name. Later
    ones sharing it (e.g. "English" and "English SDH" told apart only by
    title) get their subtitle index added: ``movie.eng.3.vtt``.
    """
    paths: list[Path] = []
    for extraction in extractions:
        path = subtitle_output_path(video_path, extraction, extension)
        if path in paths:
            path = path.with_name(
                f"{path.stem}.{extraction.subtitle_index}{path.suffix}"
            )
        paths.append(path)
    return paths


def build_fix_disposition_command(
    action: FixDisposition,
    total_audio_streams: int,
    source: Path,
    output: Path,
) -> FFmpegInvocation:
    """Stream-copy video and all audio, moving the default flag.

    The previous default is cleared before the target is set so that the
    target wins if both refer to the same stream.
    """
    _check_target(action.target_index, total_audio_streams)

    maps = ["0:v:0"] + [f"0:a:{i}" for i in range(total_audio_streams)]
    options: list[tuple[str, str]] = [("c", "copy")]
    previous = action.previous_default_index
    if previous is not None and previous != action.target_index:
        options.append((f"disposition:a:{previous}", "0"))
    options.append((f"disposition:a:{action.target_index}", "default"))
    options.append(("movflags", "+faststart"))

    return FFmpegInvocation(
        input_path=source,
        stream_maps=tuple(maps),
        options=tuple(options),
        output_path=output,
    )


def _build_derived_stereo_command(
    target_index: int,
    total_audio_streams: int,
    source: Path,
    output: Path,
    bit_rate: int | None,
) -> FFmpegInvocation:
    """Copy video and all audio, appending a stereo AAC encode of the target.

    The appended stream becomes the only default audio stream.
    """
    _check_target(target_index, total_audio_streams)

    # The derived stream lands after all copied audio streams
    derived = total_audio_streams
    options: list[tuple[str, str]] = [
        ("c:v", "copy"),
        ("c:a", "copy"),
        (f"c:a:{derived}", TARGET_AUDIO_CODEC),
        (f"ac:a:{derived}", str(TARGET_CHANNELS)),
    ]
    if bit_rate is not None:
        options.append((f"b:a:{derived}", str(bit_rate)))
    options.extend(
        [
            ("disposition:a", "0"),
            (f"disposition:a:{derived}", "default"),
            ("movflags", "+faststart"),
        ]
    )

    return FFmpegInvocation(
        input_path=source,
        stream_maps=("0:v:0", "0:a", f"0:a:{target_index}"),
        options=tuple(options),
        output_path=output,
    )


def build_downmix_command(
    action: DownmixToStereo,
    total_audio_streams: int,
    source: Path,
    output: Path,
) -> FFmpegInvocation:
    """Append a 2-channel AAC encode of the target at its original bit rate."""
    return _build_derived_stereo_command(
        action.target_index, total_audio_streams, source, output, action.bit_rate
    )


def build_transcode_command(
    action: TranscodeToAac,
    total_audio_streams: int,
    source: Path,
    output: Path,
) -> FFmpegInvocation:
    """Append a stereo AAC encode of the target at the encoder's default rate."""
    return _build_derived_stereo_command(
        action.target_index, total_audio_streams, source, output, None
    )


def build_audio_command(
    action: AudioAction,
    total_audio_streams: int,
    source: Path,
    output: Path,
) -> FFmpegInvocation:
    """Dispatch an audio action to its command builder.

    Raises:
        TypeError: If the action is not a known audio action.
    """
    if isinstance(action, FixDisposition):
        return build_fix_disposition_command(
            action, total_audio_streams, source, output
        )
    if isinstance(action, DownmixToStereo):
        return build_downmix_command(action, total_audio_streams, source, output)
    if isinstance(action, TranscodeToAac):
        return build_transcode_command(action, total_audio_streams, source, output)
    raise TypeError(f"Unknown audio action: {action!r}")


def build_subtitle_command(
    extraction: SubtitleExtraction,
    source: Path,
    output: Path,
    caption_codec: str = DEFAULT_POLICY.caption_codec,
) -> FFmpegInvocation:
    """Convert one subtitle stream into a sidecar caption file."""
    return FFmpegInvocation(
        input_path=source,
        stream_maps=(f"0:s:{extraction.subtitle_index}",),
        options=(("c:s", caption_codec),),
        output_path=output,
    )
