"""Reporting context for discovery and cleanup progress.

The scanner and the cleanup pipeline never print. They call a
Reporter passed in by the caller; the command line supplies a
rich-based implementation, tests and library callers can use
NullReporter or their own recorder.
"""

from typing import Protocol

from dirpurge.models.candidate import CandidateDirectory, PreservationResult, RunOutcome


class Reporter(Protocol):
    """Receives progress events from the scanner and the pipeline."""

    def scan_progress(self, path: str) -> None:
        """A matching directory is being measured."""
        ...

    def batch_started(self, total: int) -> None:
        """The pipeline is about to process total candidates."""
        ...

    def candidate_started(self, candidate: CandidateDirectory) -> None:
        """Processing of one candidate begins."""
        ...

    def candidate_preserved(
        self, candidate: CandidateDirectory, result: PreservationResult
    ) -> None:
        """A backup or archive was written for the candidate."""
        ...

    def candidate_deleted(
        self, candidate: CandidateDirectory, *, dry_run: bool, use_trash: bool
    ) -> None:
        """The candidate was removed (or would have been, in dry-run)."""
        ...

    def candidate_skipped(self, candidate: CandidateDirectory) -> None:
        """The operator declined the candidate."""
        ...

    def candidate_failed(self, candidate: CandidateDirectory, error: Exception) -> None:
        """Preservation or deletion failed; the run stops."""
        ...

    def batch_finished(self, outcome: RunOutcome) -> None:
        """The pipeline ended, successfully or not."""
        ...


class NullReporter:
    """Reporter that ignores every event."""

    def scan_progress(self, path: str) -> None:
        pass

    def batch_started(self, total: int) -> None:
        pass

    def candidate_started(self, candidate: CandidateDirectory) -> None:
        pass

    def candidate_preserved(
        self, candidate: CandidateDirectory, result: PreservationResult
    ) -> None:
        pass

    def candidate_deleted(
        self, candidate: CandidateDirectory, *, dry_run: bool, use_trash: bool
    ) -> None:
        pass

    def candidate_skipped(self, candidate: CandidateDirectory) -> None:
        pass

    def candidate_failed(self, candidate: CandidateDirectory, error: Exception) -> None:
        pass

    def batch_finished(self, outcome: RunOutcome) -> None:
        pass
