"""Directory deletion operator.

Removes candidate directories either by moving them to the desktop
trash (recoverable) or by permanent recursive removal. Every failure
raises DeletionError; the caller decides whether the run continues.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from dirpurge.core.errors import DeletionError
from dirpurge.utils.shell import first_available, run_command

logger = logging.getLogger(__name__)

# Trash commands in order of preference (GLib, trash-cli, macOS/other "trash").
TRASH_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("gio", "trash"),
    ("trash-put",),
    ("trash",),
)

TRASH_TIMEOUT_SECONDS = 300.0


class DeletionOperator:
    """Deletes directories by trash move or permanent removal.

    Args:
        use_trash: If True, move to trash; otherwise remove permanently.
    """

    def __init__(self, *, use_trash: bool = True) -> None:
        self._use_trash = use_trash

    @property
    def use_trash(self) -> bool:
        """Whether deletions go to the trash."""
        return self._use_trash

    @property
    def method(self) -> str:
        """Deletion method label ("trash" or "permanent")."""
        return "trash" if self._use_trash else "permanent"

    def is_available(self) -> bool:
        """Check if the configured deletion method can run on this system.

        Permanent removal is always available; trash needs one of the
        supported trash commands on PATH.
        """
        if not self._use_trash:
            return True
        return first_available(TRASH_COMMANDS) is not None

    def delete(self, path: str) -> None:
        """Delete one directory.

        Args:
            path: Absolute path of the directory to remove.

        Raises:
            DeletionError: If the path is missing or removal fails.
        """
        target = Path(path)
        if not target.exists() and not target.is_symlink():
            raise DeletionError(path, self.method, "Path does not exist")

        if self._use_trash:
            self._move_to_trash(path)
        else:
            self._remove_permanently(target)

    def _move_to_trash(self, path: str) -> None:
        """Move a path to the trash with the first available command."""
        command = first_available(TRASH_COMMANDS)
        if command is None:
            raise DeletionError(
                path, "trash", "No trash command found (install gio or trash-cli)"
            )

        try:
            result = run_command([*command, path], timeout=TRASH_TIMEOUT_SECONDS)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error("Trash operation failed for %s: %s", path, e)
            raise DeletionError(path, "trash", str(e)) from e

        if not result.success:
            reason = result.stderr.strip() or f"{command[0]} exited with {result.returncode}"
            logger.error("Trash operation failed for %s: %s", path, reason)
            raise DeletionError(path, "trash", reason)

        logger.info("Moved to trash: %s", path)

    def _remove_permanently(self, target: Path) -> None:
        """Remove a directory tree; a symlink is unlinked, never followed."""
        try:
            if target.is_symlink() or not target.is_dir():
                target.unlink()
            else:
                shutil.rmtree(target)
        except OSError as e:
            logger.error("Deletion failed for %s: %s", target, e)
            raise DeletionError(str(target), "permanent", str(e)) from e

        logger.info("Permanently deleted: %s", target)
