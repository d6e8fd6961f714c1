"""Domain models for discovery, preservation and deletion runs.

This module defines the core data structures shared by the scanner,
the preservation helpers and the cleanup pipeline: matched directories,
the filter parameters of a scan, preservation outcomes, and the
per-candidate state machine of a cleanup run.
"""

from dataclasses import dataclass, field
from enum import Enum


class PreservationMode(str, Enum):
    """How a candidate is preserved before deletion.

    Attributes:
        NONE: Delete without keeping a copy.
        COPY: Duplicate the directory tree under the backup root.
        ARCHIVE: Write a single zip archive under the backup root.
    """

    NONE = "none"
    COPY = "copy"
    ARCHIVE = "archive"


class CandidateState(str, Enum):
    """State of a candidate while the cleanup pipeline processes it.

    A candidate moves SELECTED -> (CONFIRMED) -> (PRESERVED) and ends in
    exactly one of DELETED, SKIPPED or FAILED.
    """

    SELECTED = "selected"
    CONFIRMED = "confirmed"
    PRESERVED = "preserved"
    DELETED = "deleted"
    SKIPPED = "skipped"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition is possible from this state."""
        return self in (CandidateState.DELETED, CandidateState.SKIPPED, CandidateState.FAILED)


@dataclass(frozen=True, slots=True)
class CandidateDirectory:
    """A directory subtree that passed every discovery filter.

    Size and item count are a snapshot taken at discovery time.

    Attributes:
        path: Absolute path of the directory.
        size_bytes: Sum of regular-file sizes in the subtree.
        age_days: Whole days since last modification, None if unreadable.
        item_count: Number of entries in the subtree, the directory included.
    """

    path: str
    size_bytes: int
    age_days: int | None = None
    item_count: int | None = None

    def __post_init__(self) -> None:
        """Validate candidate data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @property
    def size_mb(self) -> float:
        """Size in megabytes."""
        return self.size_bytes / 1024 / 1024

    def to_dict(self) -> dict[str, object]:
        """Convert to a plain record for reports."""
        return {
            "path": self.path,
            "size_bytes": self.size_bytes,
            "age_days": self.age_days,
            "item_count": self.item_count,
        }


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Parameters for one discovery pass.

    Attributes:
        targets: Name substrings; a directory matches if its basename
            contains at least one of them.
        excludes: Path substrings; a directory whose full path contains
            one of them is pruned together with its whole subtree.
        max_depth: Maximum depth below the base path (None or 0 = unlimited).
        min_size_bytes: Reject candidates smaller than this.
        min_age_days: Reject candidates younger than this, or of unknown age.
        follow_symlinks: Descend into and measure through symbolic links.
    """

    targets: tuple[str, ...]
    excludes: tuple[str, ...] = ()
    max_depth: int | None = None
    min_size_bytes: int | None = None
    min_age_days: int | None = None
    follow_symlinks: bool = False

    def __post_init__(self) -> None:
        """Validate filter values after initialization."""
        if self.max_depth is not None and self.max_depth < 0:
            msg = f"Depth cannot be negative, got {self.max_depth}"
            raise ValueError(msg)
        if self.min_size_bytes is not None and self.min_size_bytes < 0:
            msg = f"Minimum size cannot be negative, got {self.min_size_bytes}"
            raise ValueError(msg)

    @property
    def depth_limit(self) -> int | None:
        """Effective depth bound, None when unlimited."""
        return self.max_depth or None

    def is_excluded(self, path: str) -> bool:
        """Check if a full path contains any exclude substring."""
        return any(excluded in path for excluded in self.excludes)

    def matches_name(self, name: str) -> bool:
        """Check if a basename contains any target substring."""
        return any(target in name for target in self.targets)

    def accepts_age(self, age_days: int | None) -> bool:
        """Check the minimum-age filter; an unknown age never passes it."""
        if self.min_age_days is None:
            return True
        if age_days is None:
            return False
        return age_days >= self.min_age_days

    def accepts_size(self, size_bytes: int) -> bool:
        """Check the minimum-size filter."""
        if self.min_size_bytes is None:
            return True
        return size_bytes >= self.min_size_bytes


@dataclass(frozen=True, slots=True)
class PreservationResult:
    """Outcome of one backup or archive operation.

    Attributes:
        source: Directory that was preserved.
        path: Resulting backup directory or archive file.
        mode: Preservation mode that produced it.
        success: Whether the preservation completed.
        error: Error message when it did not.
    """

    source: str
    path: str
    mode: PreservationMode
    success: bool = True
    error: str | None = None


@dataclass(slots=True)
class CandidateRecord:
    """Progress of one candidate through the cleanup pipeline.

    Attributes:
        candidate: The candidate being processed.
        states: Every state the candidate entered, in order.
        preservation: Preservation outcome, if preservation ran.
        dry_run: True when deletion was only simulated.
        error: Error message if the candidate failed.
        skip_reason: Why the candidate was skipped, if it was not declined
            by the operator.
    """

    candidate: CandidateDirectory
    states: list[CandidateState] = field(default_factory=lambda: [CandidateState.SELECTED])
    preservation: PreservationResult | None = None
    dry_run: bool = False
    error: str | None = None
    skip_reason: str | None = None

    @property
    def state(self) -> CandidateState:
        """Current state."""
        return self.states[-1]

    def advance(self, state: CandidateState) -> None:
        """Move to a new state.

        Raises:
            ValueError: If the record already reached a terminal state.
        """
        if self.state.is_terminal:
            msg = f"Cannot leave terminal state {self.state.value} for {self.candidate.path}"
            raise ValueError(msg)
        self.states.append(state)


@dataclass(slots=True)
class RunOutcome:
    """Aggregate result of a cleanup run, built incrementally.

    Attributes:
        records: One record per candidate the pipeline reached.
        processed: Paths deleted (or, in dry-run, that would be deleted).
        preservation_paths: Backup directories and archives written.
    """

    records: list[CandidateRecord] = field(default_factory=list)
    processed: list[str] = field(default_factory=list)
    preservation_paths: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> list[str]:
        """Paths the operator declined or that went away with a parent."""
        return [r.candidate.path for r in self.records if r.state == CandidateState.SKIPPED]

    @property
    def failed(self) -> list[str]:
        """Paths whose preservation or deletion failed."""
        return [r.candidate.path for r in self.records if r.state == CandidateState.FAILED]

    def processed_candidates(self) -> list[CandidateDirectory]:
        """Candidates that reached the DELETED state."""
        return [r.candidate for r in self.records if r.state == CandidateState.DELETED]
