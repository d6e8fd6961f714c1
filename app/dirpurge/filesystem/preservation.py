"""Backup copies and zip archives of directories before deletion.

Two modes are supported: a verbatim copy of the directory tree under
the backup root, or a single deflate-compressed zip archive. Neither
mode ever overwrites an earlier backup. A failed preservation removes
whatever partial output this call created and raises
PreservationError naming the failing step.
"""

import logging
import os
import shutil
import zipfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from dirpurge.core.errors import PreservationError, PreservationStep
from dirpurge.models.candidate import PreservationMode, PreservationResult

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# Fixed permission bits stored for every archive member.
ARCHIVE_FILE_MODE = 0o100755
ARCHIVE_DIR_MODE = 0o040755
_MSDOS_DIRECTORY_FLAG = 0x10

_CHUNK_SIZE = 1024 * 1024

Clock = Callable[[], datetime]


def backup_directory(
    source: str | os.PathLike[str],
    backup_root: str | os.PathLike[str],
    *,
    clock: Clock = datetime.now,
) -> str:
    """Copy a directory tree into the backup root.

    The copy lands at ``<backup_root>/<name>``. If that already exists, a
    timestamped sibling ``<name>_<YYYYmmdd_HHMMSS>`` is used instead (with
    a numeric suffix if even that is taken). Only directories and regular
    files are copied; symlinks and special files are skipped.

    Args:
        source: Directory to back up.
        backup_root: Root directory for backups (created if missing).
        clock: Source of the timestamp for collision suffixes.

    Returns:
        Path of the backup directory.

    Raises:
        PreservationError: If directory creation or any file copy fails.
    """
    src = _validate_source(source)
    root = Path(backup_root)
    _create_directory(root)

    dest = root / src.name
    if dest.exists() or dest.is_symlink():
        dest = _unique_path(root, f"{src.name}_{clock().strftime(TIMESTAMP_FORMAT)}")
        logger.debug("Backup destination already exists, using %s", dest)

    try:
        _copy_tree(src, dest)
    except PreservationError:
        _discard(dest)
        raise

    logger.info("Backed up %s to %s", src, dest)
    return str(dest)


def archive_directory(
    source: str | os.PathLike[str],
    backup_root: str | os.PathLike[str],
    *,
    clock: Clock = datetime.now,
) -> str:
    """Write a directory tree into a zip archive under the backup root.

    The archive is named ``<name>_<YYYYmmdd_HHMMSS>.zip``; a numeric suffix
    is added when an archive of that name already exists. Member names
    are relative to the source directory. Regular files are deflated,
    every subdirectory gets an explicit entry, and all members carry the
    same fixed permission bits.

    Args:
        source: Directory to archive.
        backup_root: Root directory for archives (created if missing).
        clock: Source of the timestamp in the archive name.

    Returns:
        Path of the archive file.

    Raises:
        PreservationError: If any step fails; the partial archive is removed.
    """
    src = _validate_source(source)
    root = Path(backup_root)
    _create_directory(root)

    archive_path = _unique_path(
        root, f"{src.name}_{clock().strftime(TIMESTAMP_FORMAT)}", suffix=".zip"
    )

    try:
        zf = zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED)
    except OSError as e:
        raise PreservationError(
            str(archive_path), PreservationStep.OPEN, f"Failed to create archive file: {e}"
        ) from e

    try:
        _add_tree(zf, src, "")
    except PreservationError:
        _abandon_archive(zf, archive_path)
        raise

    try:
        zf.close()
    except OSError as e:
        _discard(archive_path)
        raise PreservationError(
            str(archive_path), PreservationStep.FINALIZE, f"Failed to finalize archive: {e}"
        ) from e

    logger.info("Archived %s to %s", src, archive_path)
    return str(archive_path)


class Preserver:
    """Preserves candidates with a fixed mode and backup root.

    Args:
        mode: COPY or ARCHIVE.
        backup_root: Root directory for backups and archives.
        clock: Source of timestamps for destination names.
    """

    def __init__(
        self,
        mode: PreservationMode,
        backup_root: str | os.PathLike[str],
        *,
        clock: Clock = datetime.now,
    ) -> None:
        if mode == PreservationMode.NONE:
            msg = "Preserver requires COPY or ARCHIVE mode"
            raise ValueError(msg)
        self._mode = mode
        self._backup_root = Path(backup_root)
        self._clock = clock

    @property
    def mode(self) -> PreservationMode:
        """Preservation mode."""
        return self._mode

    @property
    def backup_root(self) -> Path:
        """Root directory receiving backups."""
        return self._backup_root

    def preserve(self, source: str) -> PreservationResult:
        """Back up or archive one directory.

        Args:
            source: Directory to preserve.

        Returns:
            Successful PreservationResult with the written path.

        Raises:
            PreservationError: If preservation fails.
        """
        if self._mode == PreservationMode.ARCHIVE:
            path = archive_directory(source, self._backup_root, clock=self._clock)
        else:
            path = backup_directory(source, self._backup_root, clock=self._clock)
        return PreservationResult(source=source, path=path, mode=self._mode)


# === Private helpers ===


def _validate_source(source: str | os.PathLike[str]) -> Path:
    """Check that source is a named, existing directory."""
    src = Path(source)
    if not src.name:
        raise PreservationError(str(src), PreservationStep.INVALID_SOURCE, "Invalid directory name")
    if not src.is_dir():
        raise PreservationError(str(src), PreservationStep.INVALID_SOURCE, "Not a directory")
    return src


def _create_directory(path: Path) -> None:
    """Create a directory and its parents if missing."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PreservationError(
            str(path), PreservationStep.CREATE_DIRECTORY, f"Failed to create directory: {e}"
        ) from e


def _unique_path(root: Path, stem: str, suffix: str = "") -> Path:
    """Return root/<stem><suffix>, adding _1, _2, ... until it is unused."""
    candidate = root / f"{stem}{suffix}"
    counter = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = root / f"{stem}_{counter}{suffix}"
        counter += 1
    return candidate


def _list_entries(path: Path) -> list[os.DirEntry[str]]:
    """List a directory in name order."""
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise PreservationError(
            str(path), PreservationStep.READ, f"Failed to read directory: {e}"
        ) from e


def _copy_tree(src: Path, dst: Path) -> None:
    """Recursively copy directories and regular files from src into dst."""
    _create_directory(dst)

    for entry in _list_entries(src):
        target = dst / entry.name
        if entry.is_dir(follow_symlinks=False):
            _copy_tree(Path(entry.path), target)
        elif entry.is_file(follow_symlinks=False):
            try:
                shutil.copy2(entry.path, target, follow_symlinks=False)
            except OSError as e:
                raise PreservationError(
                    entry.path, PreservationStep.COPY, f"Failed to copy file: {e}"
                ) from e
        else:
            logger.debug("Skipping non-regular entry: %s", entry.path)


def _add_tree(zf: zipfile.ZipFile, directory: Path, prefix: str) -> None:
    """Add the contents of directory to the archive under prefix."""
    for entry in _list_entries(directory):
        name = f"{prefix}{entry.name}"
        if entry.is_dir(follow_symlinks=False):
            _add_directory_entry(zf, f"{name}/")
            _add_tree(zf, Path(entry.path), f"{name}/")
        elif entry.is_file(follow_symlinks=False):
            _add_file(zf, Path(entry.path), name)
        else:
            logger.debug("Skipping non-regular entry: %s", entry.path)


def _add_directory_entry(zf: zipfile.ZipFile, name: str) -> None:
    """Write an explicit directory member."""
    info = zipfile.ZipInfo(name, date_time=datetime.now().timetuple()[:6])
    info.external_attr = (ARCHIVE_DIR_MODE << 16) | _MSDOS_DIRECTORY_FLAG
    info.compress_type = zipfile.ZIP_STORED
    try:
        zf.writestr(info, b"")
    except OSError as e:
        raise PreservationError(
            name, PreservationStep.WRITE, f"Failed to add directory to archive: {e}"
        ) from e


def _add_file(zf: zipfile.ZipFile, path: Path, name: str) -> None:
    """Stream one regular file into the archive."""
    logger.debug("Adding to archive: %s", name)
    try:
        info = zipfile.ZipInfo.from_file(path, name, strict_timestamps=False)
        source = open(path, "rb")  # noqa: SIM115
    except OSError as e:
        raise PreservationError(
            str(path), PreservationStep.OPEN, f"Failed to open file for archiving: {e}"
        ) from e

    info.external_attr = ARCHIVE_FILE_MODE << 16
    info.compress_type = zipfile.ZIP_DEFLATED

    with source:
        try:
            writer = zf.open(info, "w", force_zip64=info.file_size > zipfile.ZIP64_LIMIT)
        except OSError as e:
            raise PreservationError(
                str(path), PreservationStep.WRITE, f"Failed to add file to archive: {e}"
            ) from e
        with writer:
            while True:
                try:
                    chunk = source.read(_CHUNK_SIZE)
                except OSError as e:
                    raise PreservationError(
                        str(path), PreservationStep.READ, f"Failed to read file for archiving: {e}"
                    ) from e
                if not chunk:
                    break
                try:
                    writer.write(chunk)
                except OSError as e:
                    raise PreservationError(
                        str(path), PreservationStep.WRITE, f"Failed to write file to archive: {e}"
                    ) from e


def _abandon_archive(zf: zipfile.ZipFile, archive_path: Path) -> None:
    """Close and remove an archive whose writing failed."""
    try:
        zf.close()
    except (OSError, ValueError) as e:
        logger.warning("Could not close partial archive %s: %s", archive_path, e)
    _discard(archive_path)


def _discard(path: Path) -> None:
    """Remove partial preservation output created by this run."""
    if not path.exists() and not path.is_symlink():
        return
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        logger.info("Removed partial preservation output: %s", path)
    except OSError as e:
        logger.warning("Could not remove partial preservation output %s: %s", path, e)
