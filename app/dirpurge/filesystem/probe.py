"""Size, item count and age measurement for directory subtrees.

All measurements are best-effort: entries that cannot be read are
left out of the totals instead of raising.
"""

import logging
import os
import time
from collections.abc import Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


@dataclass(frozen=True, slots=True)
class SubtreeStats:
    """Measured totals for one directory subtree.

    Attributes:
        size_bytes: Sum of regular-file sizes.
        item_count: Number of entries, the root directory included.
    """

    size_bytes: int
    item_count: int


def _walk_entries(path: str, follow_symlinks: bool) -> Iterator[os.DirEntry[str]]:
    """Yield every entry below path, depth-first, skipping unreadable ones.

    When following symlinks, directories already visited (same device
    and inode) are not entered again, so link cycles terminate.
    """
    visited: set[tuple[int, int]] = set()
    if follow_symlinks:
        try:
            st = os.stat(path)
            visited.add((st.st_dev, st.st_ino))
        except OSError:
            pass

    stack = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", current, e)
            continue

        for entry in entries:
            yield entry
            try:
                is_dir = entry.is_dir(follow_symlinks=follow_symlinks)
            except OSError:
                continue
            if not is_dir:
                continue
            if follow_symlinks:
                try:
                    st = entry.stat(follow_symlinks=True)
                except OSError:
                    continue
                key = (st.st_dev, st.st_ino)
                if key in visited:
                    continue
                visited.add(key)
            stack.append(entry.path)


def measure(path: str, follow_symlinks: bool = False) -> SubtreeStats:
    """Measure size and item count of a subtree in a single traversal.

    Args:
        path: Directory to measure.
        follow_symlinks: Count files and directories reached through links.

    Returns:
        SubtreeStats with the byte size and the entry count.
    """
    size = 0
    count = 1 if os.path.lexists(path) else 0

    for entry in _walk_entries(path, follow_symlinks):
        count += 1
        try:
            if entry.is_file(follow_symlinks=follow_symlinks):
                size += entry.stat(follow_symlinks=follow_symlinks).st_size
        except OSError as e:
            logger.debug("Cannot stat %s: %s", entry.path, e)
            continue

    return SubtreeStats(size_bytes=size, item_count=count)


def directory_size(path: str, follow_symlinks: bool = False) -> int:
    """Get the sum of regular-file sizes under a directory."""
    return measure(path, follow_symlinks).size_bytes


def count_items(path: str, follow_symlinks: bool = False) -> int:
    """Count all entries under a directory, including the directory itself."""
    return measure(path, follow_symlinks).item_count


def age_days(path: str, now: float | None = None) -> int | None:
    """Get whole days since the directory was last modified.

    Args:
        path: Directory to check.
        now: Reference time as a POSIX timestamp (defaults to current time).

    Returns:
        Days since modification, or None if the modification time cannot
        be read or lies in the future.
    """
    try:
        mtime = os.stat(path).st_mtime
    except (OSError, ValueError):
        return None

    elapsed = (time.time() if now is None else now) - mtime
    if elapsed < 0:
        return None
    return int(elapsed // SECONDS_PER_DAY)
