"""Unit tests for run summaries and their JSON/CSV export."""

import csv
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
from dirpurge.core.errors import ReportError
from dirpurge.core.summary import CSV_FIELDS, build_summary, export_csv, export_json
from dirpurge.models.candidate import CandidateDirectory

MB = 1024 * 1024
NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def candidates() -> list[CandidateDirectory]:
    return [
        CandidateDirectory(path="/p/a/node_modules", size_bytes=3 * MB, age_days=40, item_count=11),
        CandidateDirectory(path="/p/a/b/target", size_bytes=1 * MB, age_days=3, item_count=2),
        CandidateDirectory(path="/p/c/build", size_bytes=0, age_days=None, item_count=1),
    ]


class TestBuildSummary:
    """Tests for build_summary."""

    def test_aggregates(self, candidates: list[CandidateDirectory]) -> None:
        """Totals, average and age extremes are computed over the candidates."""
        summary = build_summary(candidates, ["/backups/node_modules"], now=NOW)

        assert summary.count == 3
        assert summary.total_size_bytes == 4 * MB
        assert summary.total_size_mb == 4.0
        assert summary.average_size_mb == pytest.approx(4 / 3)
        assert summary.oldest_dir_days == 40
        assert summary.newest_dir_days == 3
        assert summary.backups == ["/backups/node_modules"]
        assert summary.timestamp == NOW.isoformat()
        assert summary.directories[0]["path"] == "/p/a/node_modules"

    def test_empty(self) -> None:
        """An empty run has zero totals and no ages."""
        summary = build_summary([], [], now=NOW)

        assert summary.count == 0
        assert summary.total_size_bytes == 0
        assert summary.average_size_mb == 0.0
        assert summary.oldest_dir_days is None
        assert summary.newest_dir_days is None

    def test_default_timestamp_is_local_iso(self) -> None:
        """Without an explicit time the current local time is used."""
        summary = build_summary([], [])

        parsed = datetime.fromisoformat(summary.timestamp)
        assert parsed.tzinfo is not None


class TestExport:
    """Tests for export_json and export_csv."""

    def test_json_contains_every_field(
        self, candidates: list[CandidateDirectory], tmp_path: Path
    ) -> None:
        """The JSON file holds the full summary."""
        summary = build_summary(candidates, [], now=NOW)
        path = tmp_path / "summary.json"

        export_json(summary, path)

        data = json.loads(path.read_text())
        assert data == summary.to_dict()
        assert set(data) == {
            "directories",
            "total_size_bytes",
            "total_size_mb",
            "count",
            "average_size_mb",
            "oldest_dir_days",
            "newest_dir_days",
            "backups",
            "timestamp",
        }
        assert data["directories"][2]["age_days"] is None

    def test_csv_rows(self, candidates: list[CandidateDirectory], tmp_path: Path) -> None:
        """The CSV has one row per directory; unknown values are empty."""
        path = tmp_path / "summary.csv"

        export_csv(build_summary(candidates, [], now=NOW), path)

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))
        assert tuple(rows[0]) == CSV_FIELDS
        assert len(rows) == 3
        assert rows[0] == {
            "path": "/p/a/node_modules",
            "size_bytes": str(3 * MB),
            "age_days": "40",
            "item_count": "11",
        }
        assert rows[2]["age_days"] == ""

    def test_csv_header_only_when_empty(self, tmp_path: Path) -> None:
        """An empty summary still writes the header."""
        path = tmp_path / "summary.csv"

        export_csv(build_summary([], [], now=NOW), path)

        assert path.read_text().strip() == ",".join(CSV_FIELDS)

    @pytest.mark.parametrize("exporter", [export_json, export_csv])
    def test_unwritable_path_raises_report_error(self, exporter, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
        """Write failures raise ReportError naming the file."""
        path = tmp_path / "missing-dir" / "summary.out"

        with pytest.raises(ReportError) as exc_info:
            exporter(build_summary([], [], now=NOW), path)

        assert exc_info.value.path == str(path)
