"""Tests for ffmpeg command construction."""

from pathlib import Path

import pytest

from streamfix.executor import (
    build_audio_command,
    build_downmix_command,
    build_fix_disposition_command,
    build_subtitle_command,
    build_transcode_command,
    remediation_output_path,
    subtitle_output_path,
    subtitle_output_paths,
)
from streamfix.executor.command import FFmpegInvocation
from streamfix.policy import (
    DownmixToStereo,
    FixDisposition,
    SubtitleExtraction,
    TranscodeToAac,
)

SOURCE = Path("/media/Movie (2020).mkv.original")
OUTPUT = Path("/media/Movie (2020).mp4")


def _option(invocation: FFmpegInvocation, key: str) -> str | None:
    """Return the value of the last option with the given key, if any."""
    value = None
    for k, v in invocation.options:
        if k == key:
            value = v
    return value


class TestFFmpegInvocation:
    """Tests for FFmpegInvocation rendering."""

    def test_to_args_order(self):
        invocation = FFmpegInvocation(
            input_path=Path("/in.mkv"),
            stream_maps=("0:v:0", "0:a:0"),
            options=(("c", "copy"),),
            output_path=Path("/out.mp4"),
        )

        assert invocation.to_args("/usr/bin/ffmpeg") == [
            "/usr/bin/ffmpeg",
            "-hide_banner",
            "-nostdin",
            "-y",
            "-i",
            "/in.mkv",
            "-map",
            "0:v:0",
            "-map",
            "0:a:0",
            "-c",
            "copy",
            "/out.mp4",
        ]

    def test_describe_quotes_paths(self):
        invocation = build_subtitle_command(
            SubtitleExtraction(0, "eng"), SOURCE, Path("/media/Movie (2020).eng.vtt")
        )
        assert "'/media/Movie (2020).mkv.original'" in invocation.describe()


class TestOutputPaths:
    """Tests for output path helpers."""

    def test_remediation_output_uses_mp4(self):
        assert remediation_output_path(Path("/m/a.b.mkv")) == Path("/m/a.b.mp4")

    def test_remediation_output_same_path_for_mp4(self):
        assert remediation_output_path(Path("/m/a.mp4")) == Path("/m/a.mp4")

    def test_subtitle_output_path(self):
        extraction = SubtitleExtraction(1, "eng")
        assert subtitle_output_path(Path("/m/Movie.mkv"), extraction) == Path(
            "/m/Movie.eng.vtt"
        )

    def test_subtitle_output_path_with_tag(self):
        extraction = SubtitleExtraction(1, "eng", custom_tag="forced")
        assert subtitle_output_path(Path("/m/Movie.mkv"), extraction, "srt") == Path(
            "/m/Movie.eng.forced.srt"
        )

    def test_subtitle_output_paths_same_language_get_unique_names(self):
        extractions = [
            SubtitleExtraction(0, "eng"),
            SubtitleExtraction(1, "eng"),
            SubtitleExtraction(2, "eng", custom_tag="forced"),
            SubtitleExtraction(3, "fre"),
        ]

        assert subtitle_output_paths(Path("/m/Movie.mkv"), extractions) == [
            Path("/m/Movie.eng.vtt"),
            Path("/m/Movie.eng.1.vtt"),
            Path("/m/Movie.eng.forced.vtt"),
            Path("/m/Movie.fre.vtt"),
        ]

    def test_subtitle_output_paths_empty(self):
        assert subtitle_output_paths(Path("/m/Movie.mkv"), []) == []


class TestFixDispositionCommand:
    """Tests for build_fix_disposition_command."""

    def test_maps_video_and_every_audio_stream(self):
        invocation = build_fix_disposition_command(
            FixDisposition(target_index=0, previous_default_index=1), 3, SOURCE, OUTPUT
        )

        assert invocation.stream_maps == ("0:v:0", "0:a:0", "0:a:1", "0:a:2")
        assert invocation.input_path == SOURCE
        assert invocation.output_path == OUTPUT

    def test_moves_default_flag(self):
        invocation = build_fix_disposition_command(
            FixDisposition(target_index=0, previous_default_index=1), 2, SOURCE, OUTPUT
        )

        assert invocation.options == (
            ("c", "copy"),
            ("disposition:a:1", "0"),
            ("disposition:a:0", "default"),
            ("movflags", "+faststart"),
        )

    def test_no_previous_default(self):
        invocation = build_fix_disposition_command(
            FixDisposition(target_index=1), 2, SOURCE, OUTPUT
        )

        assert _option(invocation, "disposition:a:1") == "default"
        assert not any(key == "disposition:a:0" for key, _ in invocation.options)

    def test_previous_equal_to_target_not_cleared(self):
        invocation = build_fix_disposition_command(
            FixDisposition(target_index=0, previous_default_index=0), 1, SOURCE, OUTPUT
        )
        assert [v for k, v in invocation.options if k == "disposition:a:0"] == [
            "default"
        ]

    def test_target_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            build_fix_disposition_command(FixDisposition(2), 2, SOURCE, OUTPUT)


class TestDerivedStereoCommands:
    """Tests for downmix and transcode commands."""

    def test_downmix_appends_stereo_copy(self):
        invocation = build_downmix_command(
            DownmixToStereo(target_index=0, bit_rate=384000), 1, SOURCE, OUTPUT
        )

        assert invocation.stream_maps == ("0:v:0", "0:a", "0:a:0")
        assert invocation.options == (
            ("c:v", "copy"),
            ("c:a", "copy"),
            ("c:a:1", "aac"),
            ("ac:a:1", "2"),
            ("b:a:1", "384000"),
            ("disposition:a", "0"),
            ("disposition:a:1", "default"),
            ("movflags", "+faststart"),
        )

    def test_derived_stream_follows_all_audio(self):
        invocation = build_downmix_command(
            DownmixToStereo(target_index=1, bit_rate=256000), 3, SOURCE, OUTPUT
        )

        assert invocation.stream_maps[-1] == "0:a:1"
        assert _option(invocation, "c:a:3") == "aac"
        assert _option(invocation, "disposition:a:3") == "default"

    def test_transcode_has_no_bit_rate(self):
        invocation = build_transcode_command(
            TranscodeToAac(target_index=0), 2, SOURCE, OUTPUT
        )

        assert _option(invocation, "c:a:2") == "aac"
        assert _option(invocation, "ac:a:2") == "2"
        assert _option(invocation, "b:a:2") is None
        # Copied streams keep their codec
        assert _option(invocation, "c:a") == "copy"

    def test_transcode_target_out_of_range(self):
        with pytest.raises(ValueError):
            build_transcode_command(TranscodeToAac(target_index=1), 1, SOURCE, OUTPUT)


class TestBuildAudioCommand:
    """Tests for action dispatch."""

    @pytest.mark.parametrize(
        "action, key",
        [
            (FixDisposition(0), "c"),
            (DownmixToStereo(0, 128000), "b:a:1"),
            (TranscodeToAac(0), "c:a:1"),
        ],
    )
    def test_dispatch(self, action, key):
        invocation = build_audio_command(action, 1, SOURCE, OUTPUT)
        assert _option(invocation, key) is not None

    def test_unknown_action(self):
        with pytest.raises(TypeError, match="Unknown audio action"):
            build_audio_command(SubtitleExtraction(0, "eng"), 1, SOURCE, OUTPUT)


class TestSubtitleCommand:
    """Tests for build_subtitle_command."""

    def test_selects_subtitle_ordinal(self):
        invocation = build_subtitle_command(
            SubtitleExtraction(2, "eng"), Path("/m/a.mkv"), Path("/m/a.eng.vtt")
        )

        assert invocation.stream_maps == ("0:s:2",)
        assert invocation.options == (("c:s", "webvtt"),)

    def test_caption_codec_from_policy(self):
        invocation = build_subtitle_command(
            SubtitleExtraction(0, "eng"),
            Path("/m/a.mkv"),
            Path("/m/a.eng.srt"),
            caption_codec="srt",
        )
        assert _option(invocation, "c:s") == "srt"
