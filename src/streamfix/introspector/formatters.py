"""Human and JSON renderings of probed streams."""

from typing import Any

from streamfix.domain.enums import CodecType
from streamfix.domain.models import ProbeResult, StreamInfo


def format_stream_line(stream: StreamInfo) -> str:
    """Format a single stream for human output.

    Args:
        stream: The stream to format.

    Returns:
        Formatted stream line, e.g. ``#1 [audio] aac 2ch eng (default)``.
    """
    parts = [f"#{stream.index}", f"[{stream.codec_type.value}]"]

    if stream.codec_name:
        parts.append(stream.codec_name)

    if stream.is_audio:
        if stream.channels:
            parts.append(f"{stream.channels}ch")
        if stream.bit_rate:
            parts.append(f"{stream.bit_rate}b/s")

    if stream.language and stream.language != "und":
        parts.append(stream.language)

    if stream.title:
        parts.append(f'"{stream.title}"')

    flags = []
    if stream.is_default:
        flags.append("default")
    if stream.is_forced:
        flags.append("forced")
    if stream.is_hearing_impaired:
        flags.append("sdh")
    if stream.is_attached_pic:
        flags.append("cover art")
    if flags:
        parts.append(f"({', '.join(flags)})")

    return " ".join(parts)


def format_human(result: ProbeResult) -> str:
    """Format a probe result grouped by stream type."""
    lines: list[str] = [f"File: {result.file_path}", "", "Streams:"]

    groups = (
        ("Video", result.video_streams),
        ("Audio", result.audio_streams),
        ("Subtitles", result.subtitle_streams),
        ("Other", tuple(s for s in result.streams if s.codec_type is CodecType.OTHER)),
    )
    for title, streams in groups:
        if streams:
            lines.append(f"  {title}:")
            lines.extend(f"    {format_stream_line(s)}" for s in streams)

    if not result.streams:
        lines.append("  (no streams found)")

    return "\n".join(lines)


def stream_to_dict(stream: StreamInfo) -> dict[str, Any]:
    """Convert a StreamInfo to a JSON-serializable dict."""
    return {
        "index": stream.index,
        "type": stream.codec_type.value,
        "codec": stream.codec_name,
        "channels": stream.channels,
        "bit_rate": stream.bit_rate,
        "language": stream.language,
        "title": stream.title,
        "is_default": stream.is_default,
        "is_forced": stream.is_forced,
        "is_hearing_impaired": stream.is_hearing_impaired,
        "is_attached_pic": stream.is_attached_pic,
    }
