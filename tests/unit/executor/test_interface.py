"""Tests for external tool resolution."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from streamfix.config import clear_config_cache
from streamfix.exceptions import ToolNotFoundError
from streamfix.executor import get_tool_path, require_tool

WHICH = "streamfix.executor.interface.shutil.which"


def test_falls_back_to_path():
    with patch(WHICH, return_value="/usr/bin/ffmpeg"):
        assert get_tool_path("ffmpeg") == Path("/usr/bin/ffmpeg")


def test_configured_path_wins(temp_dir):
    tool = temp_dir / "ffmpeg-static"
    tool.touch()
    clear_config_cache()

    with patch.dict(os.environ, {"STREAMFIX_FFMPEG_PATH": str(tool)}):
        with patch(WHICH, return_value="/usr/bin/ffmpeg") as mock_which:
            assert get_tool_path("ffmpeg") == tool

    mock_which.assert_not_called()


def test_missing_configured_path_falls_back(temp_dir, caplog):
    clear_config_cache()
    with patch.dict(
        os.environ, {"STREAMFIX_FFPROBE_PATH": str(temp_dir / "nope")}
    ):
        with patch(WHICH, return_value="/usr/bin/ffprobe"):
            assert get_tool_path("ffprobe") == Path("/usr/bin/ffprobe")


def test_require_tool_raises():
    with patch(WHICH, return_value=None):
        with pytest.raises(ToolNotFoundError, match="STREAMFIX_FFMPEG_PATH"):
            require_tool("ffmpeg")
