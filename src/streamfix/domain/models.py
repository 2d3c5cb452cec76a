"""Domain models for streamfix.

These mirror the subset of ffprobe's stream document that the remediation
policy looks at, independent of how the data was obtained.
"""

from dataclasses import dataclass, field
from pathlib import Path

from streamfix.domain.enums import CodecType


@dataclass(frozen=True)
class StreamInfo:
    """A single stream within a media container."""

    index: int
    codec_type: CodecType
    codec_name: str = ""
    # Audio-only fields
    channels: int = 0
    bit_rate: str = ""  # Decimal integer string as reported, may be empty
    # Disposition flags
    is_default: bool = False
    is_forced: bool = False
    is_hearing_impaired: bool = False
    is_attached_pic: bool = False  # Cover art reported as a video stream
    # Tags
    language: str = ""
    title: str = ""

    @property
    def is_audio(self) -> bool:
        return self.codec_type is CodecType.AUDIO

    @property
    def is_video(self) -> bool:
        return self.codec_type is CodecType.VIDEO

    @property
    def is_subtitle(self) -> bool:
        return self.codec_type is CodecType.SUBTITLE


@dataclass(frozen=True)
class ProbeResult:
    """Streams of one media file, in container order."""

    file_path: Path | None
    streams: tuple[StreamInfo, ...] = field(default_factory=tuple)

    @property
    def video_streams(self) -> tuple[StreamInfo, ...]:
        return tuple(s for s in self.streams if s.is_video)

    @property
    def audio_streams(self) -> tuple[StreamInfo, ...]:
        return tuple(s for s in self.streams if s.is_audio)

    @property
    def subtitle_streams(self) -> tuple[StreamInfo, ...]:
        return tuple(s for s in self.streams if s.is_subtitle)
