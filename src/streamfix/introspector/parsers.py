"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe's ``-show_streams`` document into
streamfix domain objects. They do no I/O so they can be tested directly
against fixture documents.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from streamfix.domain import CodecType, ProbeResult, StreamInfo
from streamfix.exceptions import ParseError

logger = logging.getLogger(__name__)


def sanitize_string(value: Any) -> str:
    """Coerce a tag value to a clean string.

    Args:
        value: Raw tag value (usually str, occasionally a number or None).

    Returns:
        String with invalid UTF-8 replaced; empty string for None.
    """
    if value is None:
        return ""
    return str(value).encode("utf-8", errors="replace").decode("utf-8").strip()


def _require_int(
    value: Any,
    field_name: str,
    stream_pos: int,
    file_path: Path | None,
) -> int:
    # bool is an int subclass but never a valid index/channel count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(
            f"Stream #{stream_pos}: expected integer {field_name}, "
            f"got {type(value).__name__}",
            file_path,
        )
    return value


def _flag(disposition: Mapping[str, Any], key: str) -> bool:
    return disposition.get(key, 0) == 1


def parse_stream(
    stream: Any,
    stream_pos: int = 0,
    file_path: Path | None = None,
) -> StreamInfo:
    """Parse a single ffprobe stream dict into a StreamInfo.

    Args:
        stream: Stream object from the ffprobe document.
        stream_pos: Position of the stream in the document (for messages).
        file_path: Optional file path for error context.

    Returns:
        StreamInfo domain object.

    Raises:
        ParseError: If the stream is not an object or has malformed
            integer fields.
    """
    if not isinstance(stream, Mapping):
        raise ParseError(
            f"Stream #{stream_pos}: expected object, got {type(stream).__name__}",
            file_path,
        )

    if "index" not in stream:
        raise ParseError(f"Stream #{stream_pos}: missing 'index'", file_path)
    index = _require_int(stream["index"], "index", stream_pos, file_path)

    codec_type = CodecType.from_ffprobe(stream.get("codec_type"))

    disposition = stream.get("disposition") or {}
    tags = stream.get("tags") or {}
    if not isinstance(disposition, Mapping) or not isinstance(tags, Mapping):
        raise ParseError(
            f"Stream #{stream_pos}: 'disposition' and 'tags' must be objects",
            file_path,
        )

    channels = 0
    if codec_type is CodecType.AUDIO and stream.get("channels") is not None:
        channels = _require_int(stream["channels"], "channels", stream_pos, file_path)

    return StreamInfo(
        index=index,
        codec_type=codec_type,
        codec_name=sanitize_string(stream.get("codec_name")).casefold(),
        channels=channels,
        bit_rate=sanitize_string(stream.get("bit_rate")),
        is_default=_flag(disposition, "default"),
        is_forced=_flag(disposition, "forced"),
        is_hearing_impaired=_flag(disposition, "hearing_impaired"),
        is_attached_pic=_flag(disposition, "attached_pic"),
        language=sanitize_string(tags.get("language")).casefold(),
        title=sanitize_string(tags.get("title")),
    )


def parse_streams(
    streams: list[Any],
    file_path: Path | None = None,
) -> tuple[StreamInfo, ...]:
    """Parse the ffprobe stream list, preserving container order.

    Args:
        streams: List of stream objects from ffprobe.
        file_path: Optional file path for error context.

    Returns:
        Tuple of StreamInfo in document order.

    Raises:
        ParseError: On malformed streams or duplicate stream indices.
    """
    parsed: list[StreamInfo] = []
    seen_indices: set[int] = set()

    for pos, raw in enumerate(streams):
        info = parse_stream(raw, pos, file_path)
        if info.index in seen_indices:
            raise ParseError(f"Duplicate stream index {info.index}", file_path)
        seen_indices.add(info.index)
        parsed.append(info)

    return tuple(parsed)


def parse_ffprobe_output(
    data: str | bytes | Mapping[str, Any],
    path: Path | None = None,
) -> ProbeResult:
    """Parse ffprobe output into a ProbeResult.

    Args:
        data: Raw JSON text from ffprobe, or an already-decoded document.
        path: Path of the probed file, kept on the result for context.

    Returns:
        ProbeResult with the parsed streams.

    Raises:
        ParseError: If the document is not valid JSON or not shaped like an
            ffprobe stream listing.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid ffprobe JSON: {e}", path) from e

    if not isinstance(data, Mapping):
        raise ParseError("ffprobe output must be a JSON object", path)

    streams = data.get("streams")
    if streams is None:
        raise ParseError(
            "Missing 'streams' in ffprobe output. "
            "File may be corrupted or not a valid media file.",
            path,
        )
    if not isinstance(streams, list):
        raise ParseError("'streams' in ffprobe output must be a list", path)

    parsed = parse_streams(streams, path)
    if not parsed:
        logger.warning("No streams found in %s", path or "probe output")

    return ProbeResult(file_path=path, streams=parsed)
