"""Stream-set classification against the remediation policy.

classify() is a pure function: a video codec gate and an early-exit check
over the whole stream list, followed by a single left-to-right fold that
picks at most one audio action and queues subtitle extractions. Stream
order matters because the first matching audio stream wins.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

from streamfix.domain import StreamInfo
from streamfix.exceptions import ParseError
from streamfix.policy.models import (
    BITMAP_SUBTITLE_CODECS,
    DEFAULT_POLICY,
    RemediationPolicy,
)
from streamfix.policy.types import (
    AudioAction,
    Classification,
    ClassificationResult,
    DownmixToStereo,
    EarlyExit,
    FixDisposition,
    RejectedCodec,
    SubtitleExtraction,
    TranscodeToAac,
)

logger = logging.getLogger(__name__)

TARGET_AUDIO_CODEC = "aac"
TARGET_CHANNELS = 2


class _ActionKind(Enum):
    FIX_DISPOSITION = "fix-disposition"
    DOWNMIX = "downmix-to-stereo"
    TRANSCODE = "transcode-to-aac"


@dataclass(frozen=True)
class _Accumulator:
    """State threaded through the stream fold."""

    audio_count: int = 0
    subtitle_count: int = 0
    action: _ActionKind | None = None
    target_index: int = 0
    raw_bit_rate: str = ""
    default_index: int | None = None
    extractions: tuple[SubtitleExtraction, ...] = ()


def is_conforming_audio(stream: StreamInfo) -> bool:
    """Return True for a default stereo AAC audio stream."""
    return (
        stream.is_audio
        and stream.codec_name == TARGET_AUDIO_CODEC
        and stream.channels == TARGET_CHANNELS
        and stream.is_default
    )


def find_rejected_video(
    streams: Iterable[StreamInfo],
    policy: RemediationPolicy = DEFAULT_POLICY,
) -> StreamInfo | None:
    """Return the first video stream whose codec is not allowed.

    Cover art (attached pictures) is reported by ffprobe as a video stream
    and is ignored.
    """
    for stream in streams:
        if (
            stream.is_video
            and not stream.is_attached_pic
            and stream.codec_name not in policy.allowed_video_codecs
        ):
            return stream
    return None


def parse_bit_rate(value: str, stream_index: int | None = None) -> int:
    """Parse an ffprobe bit rate string into bits per second.

    Args:
        value: Decimal integer string, e.g. "384000".
        stream_index: Container index of the stream, for the error message.

    Returns:
        Bit rate as int.

    Raises:
        ParseError: If the value is empty or not a plain decimal integer.
    """
    text = value.strip()
    if not text or not (text.isascii() and text.isdigit()):
        where = f" on stream {stream_index}" if stream_index is not None else ""
        raise ParseError(f"Invalid bit rate {value!r}{where}")
    return int(text)


def _subtitle_tag(stream: StreamInfo, policy: RemediationPolicy) -> str:
    if policy.tag_forced_subtitles and stream.is_forced:
        return "forced"
    if policy.tag_hearing_impaired_subtitles and stream.is_hearing_impaired:
        return "sdh"
    return ""


def _fold_subtitle(
    acc: _Accumulator, stream: StreamInfo, policy: RemediationPolicy
) -> _Accumulator:
    ordinal = acc.subtitle_count
    acc = replace(acc, subtitle_count=ordinal + 1)

    if stream.language not in policy.subtitle_languages:
        return acc
    if stream.codec_name in BITMAP_SUBTITLE_CODECS:
        logger.debug(
            "Skipping bitmap subtitle stream %d (%s, %s)",
            stream.index,
            stream.codec_name,
            stream.language,
        )
        return acc

    extraction = SubtitleExtraction(
        subtitle_index=ordinal,
        language=stream.language,
        custom_tag=_subtitle_tag(stream, policy),
        stream_index=stream.index,
    )
    return replace(acc, extractions=acc.extractions + (extraction,))


def _fold_audio(acc: _Accumulator, stream: StreamInfo) -> _Accumulator:
    ordinal = acc.audio_count
    acc = replace(acc, audio_count=ordinal + 1)
    is_aac = stream.codec_name == TARGET_AUDIO_CODEC

    if is_aac and stream.channels == TARGET_CHANNELS:
        # A stereo AAC stream beats any downmix/transcode chosen earlier,
        # but the first one found keeps the target.
        if acc.action is not _ActionKind.FIX_DISPOSITION:
            acc = replace(
                acc, action=_ActionKind.FIX_DISPOSITION, target_index=ordinal
            )
    elif stream.is_default:
        # Last one wins; fix-disposition clears only this flag, so earlier
        # default-flagged streams keep theirs.
        acc = replace(acc, default_index=ordinal)

    if acc.action is None:
        if is_aac and stream.channels != TARGET_CHANNELS:
            acc = replace(
                acc,
                action=_ActionKind.DOWNMIX,
                target_index=ordinal,
                raw_bit_rate=stream.bit_rate,
            )
        elif not is_aac:
            acc = replace(acc, action=_ActionKind.TRANSCODE, target_index=ordinal)

    return acc


def _fold(
    streams: Iterable[StreamInfo], policy: RemediationPolicy
) -> _Accumulator:
    acc = _Accumulator()
    for stream in streams:
        if stream.is_subtitle:
            acc = _fold_subtitle(acc, stream, policy)
        elif stream.is_audio:
            acc = _fold_audio(acc, stream)
    return acc


def _finalize_action(
    acc: _Accumulator, streams: tuple[StreamInfo, ...]
) -> AudioAction | None:
    if acc.action is None:
        return None
    if acc.action is _ActionKind.FIX_DISPOSITION:
        return FixDisposition(
            target_index=acc.target_index,
            previous_default_index=acc.default_index,
        )
    if acc.action is _ActionKind.DOWNMIX:
        source = [s for s in streams if s.is_audio][acc.target_index]
        return DownmixToStereo(
            target_index=acc.target_index,
            bit_rate=parse_bit_rate(acc.raw_bit_rate, source.index),
        )
    return TranscodeToAac(target_index=acc.target_index)


def classify(
    streams: Iterable[StreamInfo],
    policy: RemediationPolicy = DEFAULT_POLICY,
) -> ClassificationResult:
    """Classify a file's streams into a remediation decision.

    Args:
        streams: Streams in container order.
        policy: Remediation policy to classify against.

    Returns:
        RejectedCodec if a video stream uses a disallowed codec, EarlyExit if
        a default stereo AAC stream exists, otherwise a Classification with
        the audio action (or None) and queued subtitle extractions.

    Raises:
        ParseError: If downmix is chosen and the source bit rate is not a
            decimal integer.
    """
    streams = tuple(streams)

    rejected = find_rejected_video(streams, policy)
    if rejected is not None:
        return RejectedCodec(codec_name=rejected.codec_name or "unknown")

    if any(is_conforming_audio(s) for s in streams):
        return EarlyExit()

    acc = _fold(streams, policy)
    return Classification(
        audio_action=_finalize_action(acc, streams),
        subtitle_extractions=acc.extractions,
        total_audio_streams=acc.audio_count,
    )
