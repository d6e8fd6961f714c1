"""Main CLI application entry point.

Defines the Typer application: a single command that scans a base
directory, optionally selects and confirms, then backs up or archives
and deletes the matching directories.
"""

import os
from pathlib import Path
from typing import Annotated, Any

import typer

from dirpurge import __version__
from dirpurge.cli.display import (
    ConsoleReporter,
    create_results_table,
    print_banner,
    print_candidates,
)
from dirpurge.cli.prompts import confirm_candidate, prompt_confirm_phrase, select_candidates
from dirpurge.core.config import (
    ConfigError,
    DirpurgeConfig,
    RunSettings,
    load_config,
    save_config,
)
from dirpurge.core.errors import PipelineAbortedError, ReportError
from dirpurge.core.paths import get_config_path
from dirpurge.core.pipeline import CleanupPipeline, confirm_batch
from dirpurge.core.summary import build_summary, export_csv, export_json
from dirpurge.filesystem.operator import DeletionOperator
from dirpurge.filesystem.preservation import Preserver
from dirpurge.filesystem.scanner import DirectoryScanner
from dirpurge.models.candidate import CandidateDirectory, PreservationMode, RunOutcome
from dirpurge.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from dirpurge.utils.log import configure_logging

app = typer.Typer(
    name="dirpurge",
    help="Find and remove build caches and dependency folders, safely.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog="Tip: always run with --dry-run first.",
)

# Command-line parameters that map one-to-one onto DirpurgeConfig fields.
CONFIG_PARAMETERS: tuple[str, ...] = tuple(DirpurgeConfig.model_fields)
COMMAND_LINE_SOURCE = "COMMANDLINE"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dirpurge version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Base directory to search.")],
    target: Annotated[
        list[str] | None,
        typer.Option("--target", "-t", help="Directory name substrings to match (repeatable)."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-e", help="Path substrings to exclude (repeatable)."),
    ] = None,
    depth: Annotated[
        int | None,
        typer.Option("--depth", min=0, help="Maximum search depth (0 = unlimited)."),
    ] = None,
    min_size: Annotated[
        float | None,
        typer.Option("--min-size", min=0, help="Minimum directory size in MB."),
    ] = None,
    min_age: Annotated[
        int | None,
        typer.Option("--min-age", min=0, help="Minimum age in days."),
    ] = None,
    follow_symlinks: Annotated[
        bool,
        typer.Option("--follow-symlinks", help="Follow symbolic links during search."),
    ] = False,
    delete: Annotated[bool, typer.Option("--delete", help="Perform deletion.")] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation phrase."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-d", help="Simulate without making changes."),
    ] = False,
    use_trash: Annotated[
        bool,
        typer.Option(
            "--use-trash/--permanent",
            help="Move to trash (default) or delete permanently.",
        ),
    ] = True,
    backup: Annotated[
        bool,
        typer.Option("--backup", "-b", help="Copy directories to the backup dir first."),
    ] = False,
    archive: Annotated[
        bool,
        typer.Option("--archive", "-a", help="Zip directories into the backup dir first."),
    ] = False,
    backup_dir: Annotated[
        str | None,
        typer.Option("--backup-dir", metavar="DIR", help="Directory for backups/archives."),
    ] = None,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Select directories interactively."),
    ] = False,
    confirm_each: Annotated[
        bool,
        typer.Option("--confirm-each", help="Ask before deleting each directory."),
    ] = False,
    confirm_phrase: Annotated[
        str | None,
        typer.Option("--confirm-phrase", help="Phrase required to confirm deletion."),
    ] = None,
    json_output: Annotated[
        str | None,
        typer.Option("--json", metavar="FILE", help="Export summary to a JSON file."),
    ] = None,
    csv_output: Annotated[
        str | None,
        typer.Option("--csv", metavar="FILE", help="Export summary to a CSV file."),
    ] = None,
    log_file: Annotated[
        str | None,
        typer.Option("--log", metavar="FILE", help="Write log to a file."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", metavar="FILE", help="Load configuration from a TOML file."),
    ] = None,
    save_config_path: Annotated[
        Path | None,
        typer.Option("--save-config", metavar="FILE", help="Save current settings to a file."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output.")] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-essential output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Scan PATH for matching directories and optionally remove them."""
    config = _load_layered_config(ctx, config_path)
    settings = config.resolve()

    try:
        configure_logging(settings.log_path, verbose=settings.verbose, quiet=settings.quiet)
    except OSError as e:
        print_error(f"Failed to create log file: {e}")
        raise typer.Exit(code=1) from e

    if save_config_path is not None:
        try:
            saved = save_config(config, save_config_path)
        except ConfigError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        print_success(f"Configuration saved to {saved}")

    if not settings.quiet:
        print_banner(console, path, settings)

    reporter = ConsoleReporter(
        console,
        verbose=settings.verbose,
        show_progress=not settings.quiet and not settings.confirm_each,
    )
    scanner = DirectoryScanner(settings.criteria(_backup_excludes(settings)), reporter=reporter)
    with reporter.scanning():
        candidates = scanner.discover(path)

    if not candidates:
        print_info("No matching directories found")
        return

    if not settings.quiet:
        print_candidates(console, candidates)

    selected = select_candidates(console, candidates) if settings.interactive else candidates
    if not selected:
        print_info("No directories selected for deletion")
        return

    reported = selected
    preservation_paths: list[str] = []
    if settings.destructive:
        outcome = _run_cleanup(settings, selected, reporter)
        if outcome is None:
            return
        reported = outcome.processed_candidates()
        preservation_paths = outcome.preservation_paths
    elif not settings.quiet:
        print_info("Use --delete to remove directories or --dry-run to simulate")

    if not _export_reports(settings, reported, preservation_paths):
        raise typer.Exit(code=1)


# === Private helper functions ===


def _load_layered_config(ctx: typer.Context, config_path: Path | None) -> DirpurgeConfig:
    """Combine the config file with options given on the command line.

    An explicit --config file must exist; otherwise the default user
    config is used when present.
    """
    base = DirpurgeConfig()
    path = config_path
    if path is None and get_config_path().exists():
        path = get_config_path()

    try:
        if path is not None:
            base = load_config(path)
        return base.merged_with(_command_line_overrides(ctx))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _command_line_overrides(ctx: typer.Context) -> dict[str, Any]:
    """Collect the options that were given explicitly on the command line."""
    overrides: dict[str, Any] = {}
    for name in CONFIG_PARAMETERS:
        source = ctx.get_parameter_source(name)
        # typer may bundle its own click, so compare by member name.
        if source is None or source.name != COMMAND_LINE_SOURCE:
            continue
        value = ctx.params[name]
        overrides[name] = list(value) if isinstance(value, tuple) else value
    return overrides


def _backup_excludes(settings: RunSettings) -> tuple[str, ...]:
    """Keep the backup root out of the scan when preservation is on."""
    if settings.preservation == PreservationMode.NONE or settings.backup_dir is None:
        return ()
    return (os.path.abspath(settings.backup_dir),)


def _run_cleanup(
    settings: RunSettings,
    selected: list[CandidateDirectory],
    reporter: ConsoleReporter,
) -> RunOutcome | None:
    """Pass the bulk gate and run the cleanup pipeline.

    Returns:
        The run outcome, or None if the operator canceled.

    Raises:
        typer.Exit: With code 1 if the run aborted on a failure.
    """
    if not settings.yes:
        phrase = settings.confirm_phrase
        if not confirm_batch(lambda p: prompt_confirm_phrase(console, p), phrase):
            print_info("Operation canceled")
            return None

    operator = DeletionOperator(use_trash=settings.use_trash)
    if not settings.dry_run and not operator.is_available():
        print_error("No trash command found (install gio or trash-cli), or use --permanent")
        raise typer.Exit(code=1)

    preserver = None
    if settings.preservation != PreservationMode.NONE and settings.backup_dir is not None:
        preserver = Preserver(settings.preservation, settings.backup_dir)

    confirm = None
    if settings.confirm_each:
        confirm = lambda candidate: confirm_candidate(console, candidate)  # noqa: E731

    pipeline = CleanupPipeline(
        operator,
        preserver=preserver,
        dry_run=settings.dry_run,
        confirm=confirm,
        reporter=reporter,
    )

    try:
        outcome = pipeline.run(selected)
    except PipelineAbortedError as e:
        if not settings.quiet:
            console.print(create_results_table(e.outcome))
        print_error(str(e.cause))
        done = len(e.outcome.processed)
        if done:
            print_warning(f"{done} director{'y' if done == 1 else 'ies'} completed before the failure")
        raise typer.Exit(code=1) from e

    if not settings.quiet:
        console.print(create_results_table(outcome))
    _print_outcome_summary(outcome)
    return outcome


def _print_outcome_summary(outcome: RunOutcome) -> None:
    """Print a one-line summary of the run."""
    count = len(outcome.processed)
    noun = "directory" if count == 1 else "directories"
    if any(r.dry_run for r in outcome.records):
        print_info(f"Dry-run: {count} {noun} would be deleted.")
    else:
        print_success(f"Operation completed: {count} {noun} processed.")
    if outcome.skipped:
        print_info(f"{len(outcome.skipped)} skipped.")


def _export_reports(
    settings: RunSettings,
    candidates: list[CandidateDirectory],
    preservation_paths: list[str],
) -> bool:
    """Write the requested summaries; every export is attempted.

    Returns:
        True if all requested exports succeeded.
    """
    if settings.json_path is None and settings.csv_path is None:
        return True

    summary = build_summary(candidates, preservation_paths)
    ok = True
    for report_path, exporter, label in (
        (settings.json_path, export_json, "JSON"),
        (settings.csv_path, export_csv, "CSV"),
    ):
        if report_path is None:
            continue
        try:
            exporter(summary, report_path)
        except ReportError as e:
            print_error(f"{label} export error: {e}")
            ok = False
        else:
            print_success(f"Saved {label} summary to {report_path}")
    return ok


if __name__ == "__main__":
    app()
