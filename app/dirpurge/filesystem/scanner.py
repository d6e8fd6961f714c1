"""Directory discovery for build caches and dependency folders.

Walks a base directory depth-first, prunes excluded subtrees, and
measures directories whose name matches a target substring. The walk
is best-effort: unreadable directories are skipped silently and a
missing base path yields no results.
"""

import logging
import os
from collections.abc import Iterator

from dirpurge.core.reporting import NullReporter, Reporter
from dirpurge.filesystem.probe import age_days, measure
from dirpurge.models.candidate import CandidateDirectory, FilterCriteria

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Finds directories matching a FilterCriteria below a base path.

    Candidates are descended into like any other directory, so a match
    nested inside another match is reported too; the cleanup pipeline
    skips it once its ancestor is gone.

    Args:
        criteria: Name, exclude, depth, size and age filters.
        reporter: Receives a scan_progress event per measured directory.
        now: Reference POSIX timestamp for age computation (defaults to
            the current time at each measurement).
    """

    def __init__(
        self,
        criteria: FilterCriteria,
        *,
        reporter: Reporter | None = None,
        now: float | None = None,
    ) -> None:
        self._criteria = criteria
        self._reporter = reporter or NullReporter()
        self._now = now

    @property
    def criteria(self) -> FilterCriteria:
        """Filters used by this scanner."""
        return self._criteria

    def discover(self, base_path: str | os.PathLike[str]) -> list[CandidateDirectory]:
        """Scan and return candidates sorted by size, largest first.

        Args:
            base_path: Directory to search.

        Returns:
            Candidates in descending size order; ties keep walk order.
        """
        return sorted(self.scan(base_path), key=lambda c: c.size_bytes, reverse=True)

    def scan(self, base_path: str | os.PathLike[str]) -> Iterator[CandidateDirectory]:
        """Walk base_path and yield every directory that passes the filters.

        Args:
            base_path: Directory to search. The base itself is depth 0 and
                is evaluated like any other directory.

        Yields:
            CandidateDirectory instances in walk order.
        """
        base = os.path.abspath(os.fspath(base_path))
        if not os.path.isdir(base):
            logger.debug("Base path is not a directory: %s", base)
            return

        limit = self._criteria.depth_limit
        follow = self._criteria.follow_symlinks
        visited: set[tuple[int, int]] = set()
        stack: list[tuple[str, int]] = [(base, 0)]

        while stack:
            path, depth = stack.pop()

            if self._criteria.is_excluded(path):
                logger.debug("Excluding directory: %s", path)
                continue

            if follow and not self._first_visit(path, visited):
                continue

            if self._criteria.matches_name(os.path.basename(path)):
                logger.debug("Found matching directory: %s", path)
                candidate = self._evaluate(path)
                if candidate is not None:
                    yield candidate

            if limit is not None and depth >= limit:
                continue

            children = self._list_subdirectories(path)
            for child in reversed(children):
                stack.append((child, depth + 1))

    def _evaluate(self, path: str) -> CandidateDirectory | None:
        """Apply the age and size filters to a matching directory.

        Age is read first so that directories failing the age filter are
        never measured.

        Args:
            path: Matching directory.

        Returns:
            CandidateDirectory, or None if a filter rejected it.
        """
        age = age_days(path, self._now)
        if not self._criteria.accepts_age(age):
            logger.debug("Rejected by age filter (%s days): %s", age, path)
            return None

        self._reporter.scan_progress(path)
        stats = measure(path, self._criteria.follow_symlinks)

        if not self._criteria.accepts_size(stats.size_bytes):
            logger.debug("Rejected by size filter (%d bytes): %s", stats.size_bytes, path)
            return None

        return CandidateDirectory(
            path=path,
            size_bytes=stats.size_bytes,
            age_days=age,
            item_count=stats.item_count,
        )

    def _list_subdirectories(self, path: str) -> list[str]:
        """List child directories of path in name order.

        Symbolic links to directories are included only when following
        links. Unreadable directories yield an empty list.
        """
        follow = self._criteria.follow_symlinks
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", path, e)
            return []

        children: list[str] = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=follow):
                    children.append(entry.path)
            except OSError:
                continue
        return sorted(children)

    @staticmethod
    def _first_visit(path: str, visited: set[tuple[int, int]]) -> bool:
        """Record a directory's identity; False if it was already walked."""
        try:
            st = os.stat(path)
        except OSError:
            return False
        key = (st.st_dev, st.st_ino)
        if key in visited:
            return False
        visited.add(key)
        return True
