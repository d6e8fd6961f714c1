"""Rich display functions and the console reporter.

Provides the banner, candidate and result tables, and a Reporter
implementation that renders scan and cleanup progress on a console.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.status import Status
from rich.table import Table

from dirpurge import __version__
from dirpurge.core.config import RunSettings
from dirpurge.models.candidate import (
    CandidateDirectory,
    CandidateState,
    PreservationMode,
    PreservationResult,
    RunOutcome,
)
from dirpurge.utils.formatting import format_mb

TABLE_LIMIT = 10


def print_banner(console: Console, base_path: Path, settings: RunSettings) -> None:
    """Print the banner and the search configuration."""
    console.print(f"\n[bold_header]dirpurge[/] [muted]v{__version__}[/]")
    console.print(f"[info]Searching in:[/] {escape(str(base_path))}")
    console.print(f"[info]Targets:[/] {', '.join(settings.targets)}")
    if settings.excludes:
        console.print(f"[info]Excluding:[/] {', '.join(settings.excludes)}")

    if not settings.verbose:
        return

    depth = str(settings.depth) if settings.depth else "unlimited"
    min_size = format_mb(settings.min_size_bytes) if settings.min_size_bytes is not None else "none"
    min_age = f"{settings.min_age_days} days" if settings.min_age_days is not None else "none"
    if settings.dry_run:
        mode = "DRY RUN"
    elif settings.delete:
        mode = "DELETE"
    else:
        mode = "SCAN ONLY"

    console.print(f"[info]Depth:[/] {depth}")
    console.print(f"[info]Min size:[/] {min_size}")
    console.print(f"[info]Min age:[/] {min_age}")
    console.print(f"[info]Follow symlinks:[/] {settings.follow_symlinks}")
    console.print(f"[info]Mode:[/] {mode}")


def create_candidates_table(candidates: list[CandidateDirectory], limit: int = TABLE_LIMIT) -> Table:
    """Create a table of the largest candidates.

    Args:
        candidates: Candidates sorted by size.
        limit: Maximum number of rows.

    Returns:
        Rich Table configured for candidate display.
    """
    table = Table(
        title=f"{len(candidates)} matching directories found",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", width=4)
    table.add_column("Path", style="path", overflow="fold")
    table.add_column("Size", style="size", justify="right")
    table.add_column("Age", justify="right")
    table.add_column("Items", justify="right", style="muted")

    for i, candidate in enumerate(candidates[:limit], start=1):
        age = f"{candidate.age_days} d" if candidate.age_days is not None else "-"
        items = str(candidate.item_count) if candidate.item_count is not None else "-"
        table.add_row(str(i), escape(candidate.path), format_mb(candidate.size_bytes), age, items)

    return table


def print_candidates(console: Console, candidates: list[CandidateDirectory]) -> None:
    """Print the candidate table, total size and overflow count."""
    console.print(create_candidates_table(candidates))
    total = sum(c.size_bytes for c in candidates)
    console.print(f"[info]Total size:[/] [size]{format_mb(total)}[/]")
    if len(candidates) > TABLE_LIMIT:
        console.print(f"[muted]... and {len(candidates) - TABLE_LIMIT} more[/]")


def print_candidate_details(console: Console, candidate: CandidateDirectory, header: str) -> None:
    """Print one candidate's metadata before a prompt."""
    console.print(f"\n{header} [path]{escape(candidate.path)}[/]")
    console.print(f"   Size: {format_mb(candidate.size_bytes)}")
    if candidate.age_days is not None:
        console.print(f"   Age: {candidate.age_days} days")
    if candidate.item_count is not None:
        console.print(f"   Items: {candidate.item_count}")


def create_results_table(outcome: RunOutcome) -> Table:
    """Create a table with the final state of every processed candidate."""
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", style="path", overflow="fold")
    table.add_column("Status", width=10)
    table.add_column("Details", style="muted", overflow="fold")

    for record in outcome.records:
        if record.dry_run:
            status = "[info]dry-run[/]"
            detail = "Would delete"
        elif record.state == CandidateState.DELETED:
            status = "[success]processed[/]"
            detail = record.preservation.path if record.preservation else ""
        elif record.state == CandidateState.SKIPPED:
            status = "[warning]skipped[/]"
            detail = record.skip_reason or "Declined by operator"
        else:
            status = "[error]failed[/]"
            detail = record.error or "Unknown error"
        table.add_row(escape(record.candidate.path), status, escape(detail))

    return table


class ConsoleReporter:
    """Reporter that renders progress with Rich.

    Args:
        console: Console to draw on.
        verbose: Print a line for every processed directory and show a
            spinner while scanning.
        show_progress: Draw a progress bar across the batch.
    """

    def __init__(
        self, console: Console, *, verbose: bool = False, show_progress: bool = True
    ) -> None:
        self._console = console
        self._verbose = verbose
        self._show_progress = show_progress
        self._status: Status | None = None
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    @contextmanager
    def scanning(self) -> Iterator[None]:
        """Show a spinner while discovery runs (verbose mode only)."""
        if not self._verbose:
            yield
            return
        with self._console.status("Scanning directories...") as status:
            self._status = status
            try:
                yield
            finally:
                self._status = None

    def scan_progress(self, path: str) -> None:
        """Show the directory being analyzed on the scan spinner."""
        if self._status is not None:
            self._status.update(f"Analyzing {path}")

    def batch_started(self, total: int) -> None:
        """Start the progress bar for a batch of candidates."""
        if not self._show_progress:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
        )
        self._progress.start()
        self._task_id = self._progress.add_task("Processing", total=total)

    def candidate_started(self, candidate: CandidateDirectory) -> None:
        """Nothing to show until the candidate reaches an outcome."""

    def candidate_preserved(
        self, candidate: CandidateDirectory, result: PreservationResult
    ) -> None:
        """Report the backup or archive location in verbose mode."""
        if self._verbose:
            verb = "Archived" if result.mode == PreservationMode.ARCHIVE else "Backed up"
            self._console.print(f"[preserved]{verb} to: {escape(result.path)}[/]")

    def candidate_deleted(
        self, candidate: CandidateDirectory, *, dry_run: bool, use_trash: bool
    ) -> None:
        """Report the deletion mode in verbose mode and advance the bar."""
        if self._verbose:
            if dry_run:
                self._console.print(f"[info]Dry-run: would delete {escape(candidate.path)}[/]")
            elif use_trash:
                self._console.print(f"[trashed]Moved to trash: {escape(candidate.path)}[/]")
            else:
                self._console.print(f"[deleted]Permanently deleted: {escape(candidate.path)}[/]")
        self._advance()

    def candidate_skipped(self, candidate: CandidateDirectory) -> None:
        """Report a skipped candidate in verbose mode and advance the bar."""
        if self._verbose:
            self._console.print(f"[muted]Skipping directory: {escape(candidate.path)}[/]")
        self._advance()

    def candidate_failed(self, candidate: CandidateDirectory, error: Exception) -> None:
        """Stop the bar and name the candidate that aborted the run."""
        self._stop()
        self._console.print(f"[error]Operation failed:[/] {escape(candidate.path)}")

    def batch_finished(self, outcome: RunOutcome) -> None:
        """Stop the progress bar."""
        self._stop()

    def _advance(self) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.advance(self._task_id)

    def _stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task_id = None
