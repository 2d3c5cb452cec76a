"""Tests for the fix command."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from streamfix.cli import main
from streamfix.cli.exit_codes import ExitCode
from streamfix.exceptions import ToolNotFoundError
from streamfix.executor import original_path_for


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def library(
    temp_dir,
    probe_documents,
    conforming_fixture,
    multichannel_aac_fixture,
    hevc_fixture,
) -> Path:
    """A media directory with one file per outcome."""
    media = temp_dir / "media"
    media.mkdir()
    for name in ("movie.mkv", "good.mp4", "hevc.mkv", "broken.mkv"):
        (media / name).write_bytes(b"source")

    probe_documents["movie.mkv"] = multichannel_aac_fixture
    probe_documents["good.mp4"] = conforming_fixture
    probe_documents["hevc.mkv"] = hevc_fixture
    return media


class TestArguments:
    """Tests for file/directory mode validation."""

    def test_path_and_dir_are_exclusive(self, runner, library, mock_tools):
        result = runner.invoke(
            main, ["fix", str(library / "movie.mkv"), "--dir", str(library)]
        )
        assert result.exit_code == ExitCode.INVALID_ARGUMENTS
        assert "not both" in result.output

    def test_recursive_requires_dir(self, runner, library, mock_tools):
        result = runner.invoke(main, ["fix", str(library / "movie.mkv"), "--recursive"])
        assert result.exit_code == ExitCode.INVALID_ARGUMENTS
        assert "--recursive" in result.output

    def test_nothing_to_process(self, runner, mock_tools):
        result = runner.invoke(main, ["fix"])
        assert result.exit_code == ExitCode.INVALID_ARGUMENTS

    def test_dir_must_be_directory(self, runner, library, mock_tools):
        result = runner.invoke(main, ["fix", "--dir", str(library / "movie.mkv")])
        assert result.exit_code == ExitCode.INVALID_ARGUMENTS

    def test_invalid_workers(self, runner, library, mock_tools):
        result = runner.invoke(main, ["fix", "--dir", str(library), "--workers", "0"])
        assert result.exit_code == 2
        assert "must be at least 1" in result.output

    def test_json_error(self, runner, mock_tools):
        result = runner.invoke(main, ["fix", "--json"])
        assert '"INVALID_ARGUMENTS"' in result.output


class TestSetupErrors:
    """Setup failures abort the run with a specific exit code."""

    def test_missing_file(self, runner, temp_dir, mock_tools):
        result = runner.invoke(main, ["fix", str(temp_dir / "missing.mkv")])
        assert result.exit_code == ExitCode.TARGET_NOT_FOUND

    def test_no_videos_in_dir(self, runner, temp_dir, mock_tools):
        empty = temp_dir / "empty"
        empty.mkdir()
        result = runner.invoke(main, ["fix", "--dir", str(empty)])
        assert result.exit_code == ExitCode.TARGET_NOT_FOUND
        assert "No video files found" in result.output

    def test_invalid_policy(self, runner, library, temp_dir, mock_tools):
        policy = temp_dir / "policy.yaml"
        policy.write_text("video:\n  allowed_codecs: []\n")

        result = runner.invoke(
            main, ["fix", str(library / "movie.mkv"), "--policy", str(policy)]
        )

        assert result.exit_code == ExitCode.POLICY_VALIDATION_ERROR
        assert (library / "movie.mkv").exists()

    def test_missing_policy_file(self, runner, library, temp_dir, mock_tools):
        result = runner.invoke(
            main,
            ["fix", str(library / "movie.mkv"), "--policy", str(temp_dir / "no.yaml")],
        )
        assert result.exit_code == ExitCode.POLICY_VALIDATION_ERROR

    def test_missing_ffprobe(self, runner, library, mock_tools):
        with patch(
            "streamfix.cli.common.FFprobeIntrospector",
            side_effect=ToolNotFoundError("ffprobe"),
        ):
            result = runner.invoke(main, ["fix", str(library / "movie.mkv")])
        assert result.exit_code == ExitCode.TOOL_NOT_AVAILABLE

    def test_missing_ffmpeg(self, runner, library, mock_tools):
        with patch(
            "streamfix.cli.common.require_tool",
            side_effect=ToolNotFoundError("ffmpeg"),
        ):
            result = runner.invoke(main, ["fix", str(library / "movie.mkv")])
        assert result.exit_code == ExitCode.TOOL_NOT_AVAILABLE
        assert "STREAMFIX_FFMPEG_PATH" in result.output


class TestSingleFile:
    """Tests for single-file mode."""

    def test_remediates_and_extracts(self, runner, library, mock_tools, ffmpeg_calls):
        movie = library / "movie.mkv"

        result = runner.invoke(main, ["fix", str(movie)])

        assert result.exit_code == 0, result.output
        assert "[FIXED] movie.mkv: downmix-to-stereo, 2 caption file(s)" in result.output
        assert (library / "movie.mp4").exists()
        assert (library / "movie.eng.vtt").exists()
        assert (library / "movie.eng.forced.vtt").exists()
        assert not movie.exists()
        assert not original_path_for(movie).exists()
        assert len(ffmpeg_calls) == 3

    def test_conforming_file_untouched(self, runner, library, mock_tools, ffmpeg_calls):
        result = runner.invoke(main, ["fix", str(library / "good.mp4")])

        assert result.exit_code == 0
        assert "[OK] good.mp4" in result.output
        assert ffmpeg_calls == []

    def test_dry_run(self, runner, library, mock_tools, ffmpeg_calls):
        movie = library / "movie.mkv"

        result = runner.invoke(main, ["fix", str(movie), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "[WOULD FIX] movie.mkv" in result.output
        assert "ffmpeg -hide_banner" in result.output
        assert ffmpeg_calls == []
        assert movie.exists()
        assert not (library / "movie.mp4").exists()


class TestDirectoryMode:
    """Tests for --dir mode."""

    def test_reports_each_file_and_fails_on_error(
        self, runner, library, mock_tools
    ):
        result = runner.invoke(main, ["fix", "--dir", str(library)])

        assert result.exit_code == ExitCode.OPERATION_FAILED
        assert "[FAILED] broken.mkv" in result.output
        assert "[OK] good.mp4" in result.output
        assert "[SKIPPED] hevc.mkv: hevc video is not supported" in result.output
        assert "[FIXED] movie.mkv" in result.output
        assert "Processed 4 file(s): 1 fixed" in result.output
        assert "1 failed" in result.output
        # The rejected file is never renamed
        assert (library / "hevc.mkv").exists()

    def test_all_successful(self, runner, library, mock_tools):
        (library / "broken.mkv").unlink()
        result = runner.invoke(main, ["fix", "--dir", str(library)])
        assert result.exit_code == 0

    def test_recursive(self, runner, library, probe_documents, conforming_fixture, mock_tools):
        (library / "broken.mkv").unlink()
        season = library / "season1"
        season.mkdir()
        (season / "ep1.mp4").write_bytes(b"source")
        probe_documents["ep1.mp4"] = conforming_fixture

        flat = runner.invoke(main, ["fix", "--dir", str(library), "--dry-run"])
        deep = runner.invoke(
            main, ["fix", "--dir", str(library), "--recursive", "--dry-run"]
        )

        assert "ep1.mp4" not in flat.output
        assert "[OK] ep1.mp4" in deep.output

    def test_json_output(self, runner, library, mock_tools):
        result = runner.invoke(main, ["fix", "--dir", str(library), "--json"])

        assert result.exit_code == ExitCode.OPERATION_FAILED
        data = json.loads(result.output)
        assert data["dry_run"] is False
        assert data["summary"]["total"] == 4
        assert data["summary"]["failed"] == 1
        assert data["summary"]["rejected"] == 1
        assert data["summary"]["conforming"] == 1
        assert data["summary"]["remediated"] == 1

        by_name = {Path(r["file"]).name: r for r in data["results"]}
        assert by_name["hevc.mkv"]["rejected_codec"] == "hevc"
        assert by_name["movie.mkv"]["action"] == "downmix-to-stereo"
        assert by_name["movie.mkv"]["output"].endswith("movie.mp4")
        assert len(by_name["movie.mkv"]["captions"]) == 2
        assert by_name["broken.mkv"]["error_type"] == "MediaIntrospectionError"


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
