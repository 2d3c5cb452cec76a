"""Remediation policy model."""

from dataclasses import dataclass

# Subtitle codecs that are images, not text; ffmpeg cannot turn them into
# WebVTT.
BITMAP_SUBTITLE_CODECS: frozenset[str] = frozenset(
    {"hdmv_pgs_subtitle", "dvd_subtitle", "dvb_subtitle", "xsub"}
)


@dataclass(frozen=True)
class RemediationPolicy:
    """What a conforming file looks like and how to produce one.

    Video codecs form an allow-list: any non-cover-art video stream whose
    codec is not listed is rejected.
    """

    allowed_video_codecs: frozenset[str] = frozenset({"h264"})
    subtitle_languages: frozenset[str] = frozenset({"eng"})
    caption_codec: str = "webvtt"
    caption_extension: str = "vtt"
    output_extension: str = "mp4"
    tag_forced_subtitles: bool = True
    tag_hearing_impaired_subtitles: bool = True

    def __post_init__(self) -> None:
        """Validate policy values."""
        if not self.allowed_video_codecs:
            raise ValueError("allowed_video_codecs must not be empty")
        for attr in ("caption_extension", "output_extension"):
            value = getattr(self, attr)
            if not value or value.startswith(".") or "/" in value:
                raise ValueError(f"{attr} must be a bare extension, got {value!r}")


DEFAULT_POLICY = RemediationPolicy()
