"""Tests for EnvReader."""

from pathlib import Path

import pytest

from streamfix.config import EnvReader


class TestEnvReader:
    """Tests for STREAMFIX_* lookup and type conversion."""

    def test_names_are_prefixed(self):
        reader = EnvReader(env={"STREAMFIX_LOG_LEVEL": "debug", "LOG_LEVEL": "error"})
        assert reader.get_str("LOG_LEVEL") == "debug"
        assert reader.get_str("MISSING", "info") == "info"

    def test_custom_prefix(self):
        reader = EnvReader(env={"SF_WORKERS": "3"}, prefix="SF_")
        assert reader.get_int("WORKERS") == 3

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_value_counts_as_unset(self, value):
        reader = EnvReader(env={"STREAMFIX_WORKERS": value})
        assert reader.raw("WORKERS") is None
        assert reader.get_int("WORKERS", 2) == 2

    def test_get_int(self):
        reader = EnvReader(env={"STREAMFIX_WORKERS": " 4 "})
        assert reader.get_int("WORKERS", 1) == 4

    def test_invalid_int_is_ignored(self, caplog):
        reader = EnvReader(env={"STREAMFIX_WORKERS": "four"})
        assert reader.get_int("WORKERS", 1) == 1
        assert "Ignoring STREAMFIX_WORKERS='four': not a valid integer" in caplog.text

    def test_get_float(self):
        reader = EnvReader(
            env={"STREAMFIX_RETRY_DELAY": "0.5", "STREAMFIX_TIMEOUT": "soon"}
        )
        assert reader.get_float("RETRY_DELAY", 1.0) == 0.5
        assert reader.get_float("TIMEOUT", 1.0) == 1.0

    def test_get_bool(self):
        reader = EnvReader(
            env={"STREAMFIX_A": "Yes", "STREAMFIX_B": "0", "STREAMFIX_C": "on"}
        )
        assert reader.get_bool("A") is True
        assert reader.get_bool("B") is False
        assert reader.get_bool("C") is True
        assert reader.get_bool("D", False) is False

    def test_tool_path_must_exist(self, temp_dir, caplog):
        reader = EnvReader(
            env={
                "STREAMFIX_FFMPEG_PATH": str(temp_dir),
                "STREAMFIX_FFPROBE_PATH": str(temp_dir / "missing"),
            }
        )
        assert reader.get_path("FFMPEG_PATH", must_exist=True) == temp_dir
        assert reader.get_path("FFPROBE_PATH", must_exist=True) is None
        assert "Ignoring STREAMFIX_FFPROBE_PATH" in caplog.text

    def test_output_path_need_not_exist(self, temp_dir):
        log_file = temp_dir / "logs" / "sf.log"
        reader = EnvReader(env={"STREAMFIX_LOG_FILE": str(log_file)})
        assert reader.get_path("LOG_FILE") == log_file

    def test_get_path_expands_tilde(self):
        reader = EnvReader(env={"STREAMFIX_LOG_FILE": "~/sf.log"})
        assert reader.get_path("LOG_FILE") == Path.home() / "sf.log"
