"""Domain enums for streamfix."""

from enum import Enum


class CodecType(str, Enum):
    """Kind of stream as reported by ffprobe's ``codec_type``.

    Anything ffprobe reports that streamfix does not act on (data,
    attachment, unknown) is folded into OTHER.
    """

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"
    OTHER = "other"

    @classmethod
    def from_ffprobe(cls, value: str | None) -> "CodecType":
        """Map an ffprobe codec_type string to a CodecType."""
        if not value:
            return cls.OTHER
        try:
            return cls(value.casefold())
        except ValueError:
            return cls.OTHER
