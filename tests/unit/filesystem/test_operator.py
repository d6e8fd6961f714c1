"""Unit tests for DeletionOperator.

Trash commands are mocked; permanent deletion runs against tmp_path.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from dirpurge.core.errors import DeletionError
from dirpurge.filesystem.operator import DeletionOperator
from dirpurge.utils.shell import CommandResult


@pytest.fixture
def victim(tmp_path: Path, make_file) -> Path:
    """A directory tree to delete."""
    root = tmp_path / "project" / "node_modules"
    make_file(root / "pkg" / "index.js", 100)
    return root


class TestPermanentDeletion:
    """Tests for permanent removal."""

    def test_removes_tree(self, victim: Path) -> None:
        """The whole directory tree is removed."""
        DeletionOperator(use_trash=False).delete(str(victim))

        assert not victim.exists()
        assert victim.parent.is_dir()

    def test_symlink_is_unlinked_not_followed(self, victim: Path, tmp_path: Path) -> None:
        """Deleting a link leaves its target intact."""
        link = tmp_path / "link"
        link.symlink_to(victim, target_is_directory=True)

        DeletionOperator(use_trash=False).delete(str(link))

        assert not link.is_symlink()
        assert (victim / "pkg" / "index.js").is_file()

    def test_missing_path_fails(self, tmp_path: Path) -> None:
        """Deleting a missing path raises DeletionError."""
        with pytest.raises(DeletionError, match="Path does not exist") as exc_info:
            DeletionOperator(use_trash=False).delete(str(tmp_path / "gone"))

        assert exc_info.value.method == "permanent"

    def test_os_error_wrapped(self, victim: Path) -> None:
        """Removal errors surface as DeletionError."""
        with (
            patch(
                "dirpurge.filesystem.operator.shutil.rmtree",
                side_effect=PermissionError("Operation not permitted"),
            ),
            pytest.raises(DeletionError, match="Deletion failed") as exc_info,
        ):
            DeletionOperator(use_trash=False).delete(str(victim))

        assert "Operation not permitted" in exc_info.value.reason

    def test_always_available(self) -> None:
        """Permanent removal needs no external command."""
        with patch("dirpurge.filesystem.operator.first_available", return_value=None):
            assert DeletionOperator(use_trash=False).is_available()


class TestTrash:
    """Tests for trash moves via external commands."""

    def test_uses_first_available_command(self, victim: Path) -> None:
        """The path is handed to the preferred trash command."""
        with (
            patch(
                "dirpurge.filesystem.operator.first_available",
                return_value=["gio", "trash"],
            ),
            patch(
                "dirpurge.filesystem.operator.run_command",
                return_value=CommandResult(stdout="", stderr="", returncode=0),
            ) as mock_run,
        ):
            DeletionOperator(use_trash=True).delete(str(victim))

        args = mock_run.call_args.args[0]
        assert args == ["gio", "trash", str(victim)]

    def test_nonzero_exit_fails(self, victim: Path) -> None:
        """A failing trash command raises DeletionError with its stderr."""
        with (
            patch("dirpurge.filesystem.operator.first_available", return_value=["trash-put"]),
            patch(
                "dirpurge.filesystem.operator.run_command",
                return_value=CommandResult(stdout="", stderr="cannot trash\n", returncode=1),
            ),
            pytest.raises(DeletionError, match="Trash failed") as exc_info,
        ):
            DeletionOperator().delete(str(victim))

        assert exc_info.value.reason == "cannot trash"
        assert victim.exists()

    def test_timeout_fails(self, victim: Path) -> None:
        """A hanging trash command is reported as a failure."""
        with (
            patch("dirpurge.filesystem.operator.first_available", return_value=["trash"]),
            patch(
                "dirpurge.filesystem.operator.run_command",
                side_effect=subprocess.TimeoutExpired(cmd="trash", timeout=1),
            ),
            pytest.raises(DeletionError),
        ):
            DeletionOperator().delete(str(victim))

    def test_no_trash_command(self, victim: Path) -> None:
        """Without a trash command the deletion fails and nothing is removed."""
        with (
            patch("dirpurge.filesystem.operator.first_available", return_value=None),
            pytest.raises(DeletionError, match="No trash command"),
        ):
            DeletionOperator().delete(str(victim))

        assert victim.exists()

    def test_availability_follows_path_lookup(self) -> None:
        """Trash is available only when a command is installed."""
        operator = DeletionOperator(use_trash=True)
        with patch("dirpurge.filesystem.operator.first_available", return_value=None):
            assert not operator.is_available()
        with patch("dirpurge.filesystem.operator.first_available", return_value=["gio", "trash"]):
            assert operator.is_available()

    def test_method_label(self) -> None:
        """The method label reflects the mode."""
        assert DeletionOperator().method == "trash"
        assert DeletionOperator(use_trash=False).method == "permanent"
