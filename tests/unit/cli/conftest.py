"""Fixtures for CLI tests: ffprobe and ffmpeg are mocked out."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from streamfix.introspector import MediaIntrospectionError, parse_ffprobe_output


@pytest.fixture
def probe_documents() -> dict:
    """ffprobe documents keyed by file name; tests fill this in."""
    return {}


@pytest.fixture
def ffmpeg_calls() -> list:
    """Argv lists passed to the mocked ffmpeg, in call order."""
    return []


@pytest.fixture
def mock_tools(probe_documents, ffmpeg_calls):
    """Replace ffprobe/ffmpeg with fakes driven by probe_documents."""

    def probe(path: Path):
        document = probe_documents.get(path.name)
        if document is None:
            raise MediaIntrospectionError(f"ffprobe failed for {path}")
        return parse_ffprobe_output(document, path)

    def run(cmd, **kwargs):
        ffmpeg_calls.append(cmd)
        Path(cmd[-1]).write_bytes(b"ffmpeg output")
        return MagicMock(returncode=0, stdout="", stderr="")

    introspector = MagicMock()
    introspector.probe.side_effect = probe

    with (
        patch("streamfix.cli._configure_logging"),
        patch("streamfix.cli.common.FFprobeIntrospector", return_value=introspector),
        patch(
            "streamfix.cli.common.require_tool", return_value=Path("/usr/bin/ffmpeg")
        ),
        patch("streamfix.cli.common.get_tool_path", return_value=None),
        patch("streamfix.executor.ffmpeg.subprocess.run", side_effect=run),
    ):
        yield introspector
