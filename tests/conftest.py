"""Shared test fixtures for streamfix."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from streamfix.config import clear_config_cache


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def temp_video_dir(temp_dir: Path) -> Path:
    """Create a temporary directory with sample video files."""
    video_dir = temp_dir / "videos"
    video_dir.mkdir()

    (video_dir / "movie.mkv").touch()
    (video_dir / "show.mp4").touch()
    (video_dir / "notes.txt").touch()
    (video_dir / "old.mkv.original").touch()

    nested = video_dir / "nested"
    nested.mkdir()
    (nested / "episode.mkv").touch()

    # Hidden directory (should be skipped)
    hidden = video_dir / ".hidden"
    hidden.mkdir()
    (hidden / "secret.mkv").touch()

    return video_dir


@pytest.fixture
def default_extensions() -> list[str]:
    """Return the default video extensions."""
    return ["mkv", "mp4", "avi", "webm", "m4v", "mov"]


def load_ffprobe_fixture(name: str) -> dict:
    """Load an ffprobe JSON fixture by name.

    Args:
        name: Name of the fixture file (without .json extension).

    Returns:
        Parsed JSON data from the fixture.
    """
    fixture_path = Path(__file__).parent / "fixtures" / "ffprobe" / f"{name}.json"
    return json.loads(fixture_path.read_text())


@pytest.fixture
def conforming_fixture() -> dict:
    """h264 video with a default stereo AAC track."""
    return load_ffprobe_fixture("conforming")


@pytest.fixture
def multichannel_aac_fixture() -> dict:
    """h264 with 5.1 AAC and a mix of text and bitmap subtitles."""
    return load_ffprobe_fixture("multichannel_aac")


@pytest.fixture
def multi_audio_fixture() -> dict:
    """h264 with default AC3 5.1, non-default stereo AAC and cover art."""
    return load_ffprobe_fixture("multi_audio")


@pytest.fixture
def hevc_fixture() -> dict:
    """HEVC video, which the default policy rejects."""
    return load_ffprobe_fixture("hevc")


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path):
    """Point streamfix at an empty config file for every test.

    Keeps a developer's ~/.streamfix/config.toml and STREAMFIX_* variables
    from leaking into tests, and resets the cached configuration.
    """
    config_path = temp_dir / "config.toml"
    config_path.write_text('[logging]\nlevel = "info"\n')

    clean_env = {k: v for k, v in os.environ.items() if not k.startswith("STREAMFIX_")}
    clean_env["STREAMFIX_CONFIG_PATH"] = str(config_path)

    clear_config_cache()
    with patch.dict(os.environ, clean_env, clear=True):
        yield config_path
    clear_config_cache()
