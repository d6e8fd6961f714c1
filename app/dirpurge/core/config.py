"""Run configuration and settings.

This module provides the configuration model and I/O functions for
dirpurge runs. A configuration file mirrors the command-line options;
values given on the command line take precedence over file values,
and file values take precedence over built-in defaults.

Configuration is stored as TOML, by default in ~/.config/dirpurge/config.toml
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dirpurge.core.paths import get_config_path
from dirpurge.core.pipeline import DEFAULT_CONFIRM_PHRASE
from dirpurge.models.candidate import FilterCriteria, PreservationMode

logger = logging.getLogger(__name__)

DEFAULT_TARGETS: tuple[str, ...] = ("venv", ".venv", "node_modules", "target", "bin", "build")
DEFAULT_EXCLUDES: tuple[str, ...] = (".git",)
DEFAULT_BACKUP_DIR = "./backups"

BYTES_PER_MB = 1024 * 1024


class DirpurgeConfig(BaseModel):
    """Options of a dirpurge run, as read from a file or the command line.

    Every field is optional: None means "not specified here", so that a
    file and the command line can be layered. Defaults are applied by
    :meth:`resolve`.

    Attributes:
        target: Directory name substrings to match.
        exclude: Path substrings whose subtrees are skipped.
        depth: Maximum search depth (0 = unlimited).
        min_size: Minimum directory size in megabytes.
        min_age: Minimum age in days.
        follow_symlinks: Follow symbolic links while searching.
        delete: Perform deletion instead of scanning only.
        yes: Skip the bulk confirmation phrase.
        dry_run: Simulate without changing the filesystem.
        use_trash: Move to trash instead of permanent deletion.
        backup: Copy each directory to backup_dir before deletion.
        archive: Zip each directory into backup_dir before deletion
            (takes precedence over backup).
        backup_dir: Destination root for backups and archives.
        interactive: Select directories one by one.
        confirm_each: Ask before deleting each directory.
        confirm_phrase: Phrase required by the bulk confirmation gate.
        json_output: JSON summary file (key ``json``).
        csv_output: CSV summary file (key ``csv``).
        log_file: Log file (key ``log``).
        verbose: Verbose output.
        quiet: Suppress non-essential output.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    target: Annotated[list[str] | None, Field(description="Name substrings to match")] = None
    exclude: Annotated[list[str] | None, Field(description="Path substrings to skip")] = None
    depth: Annotated[int | None, Field(ge=0, description="Maximum depth (0 = unlimited)")] = None
    min_size: Annotated[float | None, Field(ge=0, description="Minimum size in MB")] = None
    min_age: Annotated[int | None, Field(ge=0, description="Minimum age in days")] = None
    follow_symlinks: bool | None = None
    delete: bool | None = None
    yes: bool | None = None
    dry_run: bool | None = None
    use_trash: bool | None = None
    backup: bool | None = None
    archive: bool | None = None
    backup_dir: str | None = None
    interactive: bool | None = None
    confirm_each: bool | None = None
    confirm_phrase: Annotated[str | None, Field(min_length=1)] = None
    json_output: Annotated[str | None, Field(alias="json")] = None
    csv_output: Annotated[str | None, Field(alias="csv")] = None
    log_file: Annotated[str | None, Field(alias="log")] = None
    verbose: bool | None = None
    quiet: bool | None = None

    def merged_with(self, overrides: dict[str, Any]) -> "DirpurgeConfig":
        """Layer overrides on top of this configuration.

        Args:
            overrides: Field names to values; None values are ignored.

        Returns:
            New validated DirpurgeConfig.

        Raises:
            ConfigError: If the merged values are invalid.
        """
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return DirpurgeConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid option value: {e}") from e

    def resolve(self) -> "RunSettings":
        """Apply defaults and convert units.

        Returns:
            RunSettings ready for a run.
        """
        if self.archive:
            mode = PreservationMode.ARCHIVE
        elif self.backup:
            mode = PreservationMode.COPY
        else:
            mode = PreservationMode.NONE

        backup_dir = self.backup_dir if self.backup_dir is not None else DEFAULT_BACKUP_DIR
        if mode != PreservationMode.NONE and not backup_dir:
            logger.warning("No backup directory configured; preservation disabled")
            mode = PreservationMode.NONE

        quiet = bool(self.quiet)
        return RunSettings(
            targets=tuple(self.target) if self.target is not None else DEFAULT_TARGETS,
            excludes=tuple(self.exclude) if self.exclude is not None else DEFAULT_EXCLUDES,
            depth=self.depth or None,
            min_size_bytes=int(self.min_size * BYTES_PER_MB) if self.min_size is not None else None,
            min_age_days=self.min_age,
            follow_symlinks=bool(self.follow_symlinks),
            delete=bool(self.delete),
            yes=bool(self.yes),
            dry_run=bool(self.dry_run),
            use_trash=self.use_trash if self.use_trash is not None else True,
            preservation=mode,
            backup_dir=Path(backup_dir) if backup_dir else None,
            interactive=bool(self.interactive),
            confirm_each=bool(self.confirm_each),
            confirm_phrase=self.confirm_phrase or DEFAULT_CONFIRM_PHRASE,
            json_path=Path(self.json_output) if self.json_output else None,
            csv_path=Path(self.csv_output) if self.csv_output else None,
            log_path=Path(self.log_file) if self.log_file else None,
            verbose=bool(self.verbose) and not quiet,
            quiet=quiet,
        )


@dataclass(frozen=True, slots=True)
class RunSettings:
    """Resolved settings with defaults applied.

    Sizes are in bytes; ``depth`` is None when unlimited; ``quiet`` wins
    over ``verbose`` when both are set.
    """

    targets: tuple[str, ...]
    excludes: tuple[str, ...]
    depth: int | None
    min_size_bytes: int | None
    min_age_days: int | None
    follow_symlinks: bool
    delete: bool
    yes: bool
    dry_run: bool
    use_trash: bool
    preservation: PreservationMode
    backup_dir: Path | None
    interactive: bool
    confirm_each: bool
    confirm_phrase: str
    json_path: Path | None
    csv_path: Path | None
    log_path: Path | None
    verbose: bool
    quiet: bool

    @property
    def destructive(self) -> bool:
        """True when the cleanup pipeline should run (delete or dry-run)."""
        return self.delete or self.dry_run

    def criteria(self, extra_excludes: tuple[str, ...] = ()) -> FilterCriteria:
        """Build discovery filters from these settings."""
        return FilterCriteria(
            targets=self.targets,
            excludes=self.excludes + extra_excludes,
            max_depth=self.depth,
            min_size_bytes=self.min_size_bytes,
            min_age_days=self.min_age_days,
            follow_symlinks=self.follow_symlinks,
        )


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> DirpurgeConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated DirpurgeConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config file not found: {config_path}")

    logger.debug("Loading config from %s", config_path)
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Error parsing config {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading config {config_path}: {e}") from e

    try:
        return DirpurgeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: DirpurgeConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename. Unset options are
    left out.

    Args:
        config: The DirpurgeConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = config.model_dump(by_alias=True, exclude_none=True)
    logger.debug("Saving config to %s", config_path)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Error writing config {config_path}: {e}") from e

    return config_path
