"""Run summary construction and JSON/CSV export."""

import csv
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from dirpurge.core.errors import ReportError
from dirpurge.models.candidate import CandidateDirectory

logger = logging.getLogger(__name__)

CSV_FIELDS = ("path", "size_bytes", "age_days", "item_count")


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Aggregate report of a run.

    Attributes:
        directories: One plain record per candidate.
        total_size_bytes: Sum of candidate sizes.
        total_size_mb: Same, in megabytes.
        count: Number of candidates.
        average_size_mb: Mean candidate size in megabytes (0 when empty).
        oldest_dir_days: Largest known age, None if no age is known.
        newest_dir_days: Smallest known age, None if no age is known.
        backups: Backup directories and archives written.
        timestamp: Local time of the report, ISO 8601.
    """

    directories: list[dict[str, object]]
    total_size_bytes: int
    total_size_mb: float
    count: int
    average_size_mb: float
    oldest_dir_days: int | None
    newest_dir_days: int | None
    backups: list[str]
    timestamp: str

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-serializable dictionary."""
        return asdict(self)


def build_summary(
    candidates: list[CandidateDirectory],
    preservation_paths: list[str],
    *,
    now: datetime | None = None,
) -> RunSummary:
    """Aggregate candidates and preservation outputs into a RunSummary.

    Args:
        candidates: Candidates of the run (post-selection).
        preservation_paths: Backup and archive paths written during the run.
        now: Report time (defaults to the current local time).

    Returns:
        RunSummary ready for export.
    """
    total = sum(c.size_bytes for c in candidates)
    total_mb = total / 1024 / 1024
    ages = [c.age_days for c in candidates if c.age_days is not None]
    stamp = (now or datetime.now().astimezone()).isoformat()

    return RunSummary(
        directories=[c.to_dict() for c in candidates],
        total_size_bytes=total,
        total_size_mb=total_mb,
        count=len(candidates),
        average_size_mb=total_mb / len(candidates) if candidates else 0.0,
        oldest_dir_days=max(ages) if ages else None,
        newest_dir_days=min(ages) if ages else None,
        backups=list(preservation_paths),
        timestamp=stamp,
    )


def export_json(summary: RunSummary, path: Path) -> Path:
    """Write the full summary as indented JSON.

    Raises:
        ReportError: If the file cannot be written.
    """
    try:
        path.write_text(json.dumps(summary.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        logger.error("JSON export error: %s", e)
        raise ReportError(str(path), str(e)) from e

    logger.info("Saved JSON summary to %s", path)
    return path


def export_csv(summary: RunSummary, path: Path) -> Path:
    """Write one CSV row per directory.

    Raises:
        ReportError: If the file cannot be written.
    """
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for row in summary.directories:
                writer.writerow({k: "" if row[k] is None else row[k] for k in CSV_FIELDS})
    except OSError as e:
        logger.error("CSV export error: %s", e)
        raise ReportError(str(path), str(e)) from e

    logger.info("Saved CSV summary to %s", path)
    return path
