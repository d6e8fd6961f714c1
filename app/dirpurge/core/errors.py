"""Exception hierarchy for dirpurge.

Scan-level filesystem errors never appear here: the scanner absorbs
them. Preservation and deletion errors abort a cleanup run; report
errors are raised per export and handled by the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dirpurge.models.candidate import RunOutcome


class DirpurgeError(Exception):
    """Base exception for dirpurge errors."""


class PreservationStep(str, Enum):
    """Step of a backup or archive operation that failed."""

    INVALID_SOURCE = "invalid_source"
    CREATE_DIRECTORY = "create_directory"
    OPEN = "open"
    READ = "read"
    WRITE = "write"
    COPY = "copy"
    FINALIZE = "finalize"


class PreservationError(DirpurgeError):
    """Raised when a backup copy or archive cannot be completed.

    Attributes:
        path: Path the failing step operated on.
        step: Which step failed.
        reason: Underlying error message.
    """

    def __init__(self, path: str, step: PreservationStep, reason: str) -> None:
        self.path = path
        self.step = step
        self.reason = reason
        super().__init__(f"Preservation failed ({step.value}) for {path}: {reason}")


class DeletionError(DirpurgeError):
    """Raised when moving to trash or permanent removal fails.

    Attributes:
        path: Directory that could not be removed.
        method: "trash" or "permanent".
        reason: Underlying error message.
    """

    def __init__(self, path: str, method: str, reason: str) -> None:
        self.path = path
        self.method = method
        self.reason = reason
        label = "Trash" if method == "trash" else "Deletion"
        super().__init__(f"{label} failed for {path}: {reason}")


class PipelineAbortedError(DirpurgeError):
    """Raised when the cleanup pipeline stops on a fatal failure.

    Attributes:
        outcome: Partial outcome; completed candidates stay valid.
        cause: The preservation or deletion error that stopped the run.
    """

    def __init__(self, outcome: RunOutcome, cause: PreservationError | DeletionError) -> None:
        self.outcome = outcome
        self.cause = cause
        super().__init__(str(cause))


class ReportError(DirpurgeError):
    """Raised when a summary file cannot be written.

    Attributes:
        path: Report file path.
        reason: Underlying error message.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write report {path}: {reason}")
