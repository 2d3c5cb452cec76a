"""Classification result types.

A classification is a tagged union: EarlyExit, RejectedCodec, or a
Classification carrying at most one audio action plus the subtitle
extractions queued for the file. Audio actions are themselves a union of
FixDisposition, DownmixToStereo and TranscodeToAac.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class FixDisposition:
    """Stereo AAC exists but is not default: flip default flags, copy all."""

    target_index: int
    """Audio ordinal of the stereo AAC stream to make default."""

    previous_default_index: int | None = None
    """Audio ordinal of the stream currently flagged default, if any."""

    name = "fix-disposition"


@dataclass(frozen=True)
class DownmixToStereo:
    """Only multichannel AAC exists: append a 2-channel AAC copy of it."""

    target_index: int
    bit_rate: int
    """Bit rate of the source stream in bits per second."""

    name = "downmix-to-stereo"


@dataclass(frozen=True)
class TranscodeToAac:
    """No usable AAC: append an AAC stereo encode of the target stream."""

    target_index: int

    name = "transcode-to-aac"


AudioAction = Union[FixDisposition, DownmixToStereo, TranscodeToAac]


@dataclass(frozen=True)
class SubtitleExtraction:
    """A subtitle stream to extract into a sidecar caption file."""

    subtitle_index: int
    """Ordinal among the file's subtitle streams (the ``s:N`` selector)."""

    language: str
    custom_tag: str = ""
    """Optional extra filename tag such as ``forced`` or ``sdh``."""

    stream_index: int | None = None
    """Container index of the stream, for reporting."""


@dataclass(frozen=True)
class EarlyExit:
    """The file already has a default stereo AAC stream; nothing to do."""

    name = "early-exit"


@dataclass(frozen=True)
class RejectedCodec:
    """The file's video codec is outside the allowed set."""

    codec_name: str

    name = "rejected-codec"


@dataclass(frozen=True)
class Classification:
    """Remediation decided for one file."""

    audio_action: AudioAction | None = None
    subtitle_extractions: tuple[SubtitleExtraction, ...] = field(
        default_factory=tuple
    )
    total_audio_streams: int = 0

    @property
    def is_empty(self) -> bool:
        """True if neither audio remediation nor subtitle extraction is due."""
        return self.audio_action is None and not self.subtitle_extractions


ClassificationResult = Union[Classification, EarlyExit, RejectedCodec]
