"""Pydantic models for remediation policy files."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from streamfix.policy.models import DEFAULT_POLICY


def _default_list(attr: str) -> list[str]:
    return sorted(getattr(DEFAULT_POLICY, attr))


class SubtitlesModel(BaseModel):
    """Pydantic model for the ``subtitles`` policy section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    languages: list[str] = Field(
        default_factory=lambda: _default_list("subtitle_languages")
    )
    codec: str = DEFAULT_POLICY.caption_codec
    extension: str = DEFAULT_POLICY.caption_extension
    tag_forced: bool = DEFAULT_POLICY.tag_forced_subtitles
    tag_hearing_impaired: bool = DEFAULT_POLICY.tag_hearing_impaired_subtitles

    @field_validator("languages", mode="before")
    @classmethod
    def normalize_languages(cls, v: list[str] | str) -> list[str]:
        """Accept a single language and normalize to lowercase."""
        if isinstance(v, str):
            v = [v]
        return [lang.strip().casefold() for lang in v if lang.strip()]

    @field_validator("extension")
    @classmethod
    def strip_dot(cls, v: str) -> str:
        """Allow extensions written with a leading dot."""
        return v.lstrip(".")


class VideoModel(BaseModel):
    """Pydantic model for the ``video`` policy section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    allowed_codecs: list[str] = Field(
        default_factory=lambda: _default_list("allowed_video_codecs"),
        min_length=1,
    )

    @field_validator("allowed_codecs", mode="before")
    @classmethod
    def normalize_codecs(cls, v: list[str] | str) -> list[str]:
        """Accept a single codec and normalize to lowercase."""
        if isinstance(v, str):
            v = [v]
        return [codec.strip().casefold() for codec in v if codec.strip()]


class OutputModel(BaseModel):
    """Pydantic model for the ``output`` policy section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    extension: str = DEFAULT_POLICY.output_extension

    @field_validator("extension")
    @classmethod
    def strip_dot(cls, v: str) -> str:
        """Allow extensions written with a leading dot."""
        return v.lstrip(".")


class RemediationPolicyModel(BaseModel):
    """Top-level Pydantic model for a remediation policy YAML file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int = 1
    video: VideoModel = Field(default_factory=VideoModel)
    subtitles: SubtitlesModel = Field(default_factory=SubtitlesModel)
    output: OutputModel = Field(default_factory=OutputModel)
