"""Tests for cli/exit_codes.py module."""

from streamfix.cli.exit_codes import ExitCode


class TestExitCode:
    """Tests for ExitCode enum."""

    def test_success_is_zero(self) -> None:
        assert ExitCode.SUCCESS == 0

    def test_exit_codes_are_unique(self) -> None:
        """All exit codes should have unique values."""
        values = [int(code) for code in ExitCode]
        assert len(values) == len(set(values))

    def test_exit_code_ranges(self) -> None:
        """Exit codes should be within expected ranges."""
        assert 1 <= ExitCode.GENERAL_ERROR <= 9
        assert 1 <= ExitCode.INTERRUPTED <= 9
        assert 10 <= ExitCode.POLICY_VALIDATION_ERROR <= 19
        assert 10 <= ExitCode.CONFIG_ERROR <= 19
        assert 10 <= ExitCode.INVALID_ARGUMENTS <= 19
        assert 20 <= ExitCode.TARGET_NOT_FOUND <= 29
        assert 30 <= ExitCode.TOOL_NOT_AVAILABLE <= 39
        assert 40 <= ExitCode.OPERATION_FAILED <= 49
        assert 50 <= ExitCode.PARSE_ERROR <= 59
