"""Unit tests for shell execution utilities."""

from unittest.mock import MagicMock, patch

import pytest
from dirpurge.utils.shell import CommandResult, command_exists, first_available, run_command


class TestRunCommand:
    """Tests for run_command function."""

    @patch("dirpurge.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command wraps the subprocess result."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=2)

        result = run_command(["trash-put", "/tmp/x"], timeout=5.0)

        assert result == CommandResult(stdout="out", stderr="err", returncode=2)
        assert not result.success
        assert mock_run.call_args.kwargs["capture_output"] is True
        assert mock_run.call_args.kwargs["timeout"] == 5.0
        assert mock_run.call_args.kwargs["check"] is False
        assert "cwd" not in mock_run.call_args.kwargs

    def test_raises_file_not_found(self) -> None:
        """run_command raises FileNotFoundError for missing commands."""
        with pytest.raises(FileNotFoundError):
            run_command(["nonexistent_command_xyz_12345"])


class TestFirstAvailable:
    """Tests for command lookup."""

    @patch("dirpurge.utils.shell.shutil.which")
    def test_picks_first_installed(self, mock_which: MagicMock) -> None:
        """The first prefix whose executable is on PATH wins."""
        mock_which.side_effect = lambda name: "/usr/bin/trash-put" if name == "trash-put" else None

        result = first_available((("gio", "trash"), ("trash-put",), ("trash",)))

        assert result == ["trash-put"]

    @patch("dirpurge.utils.shell.shutil.which", return_value=None)
    def test_none_installed(self, mock_which: MagicMock) -> None:
        """None is returned when nothing is installed."""
        assert first_available((("gio", "trash"),)) is None
        assert not command_exists("gio")
