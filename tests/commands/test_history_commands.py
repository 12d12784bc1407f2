"""Command tests for history, summary and export."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime

import pytest
from typer.testing import CliRunner

from timelog_cli.main import app
from timelog_cli.models.timer import HistoryEntry
from timelog_cli.services.report_service import CSV_HEADER
from timelog_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND

runner = CliRunner()


@pytest.fixture()
def seeded(cli_service):
    """Two sessions logged today plus one from long ago."""
    now = int(datetime.now().timestamp() * 1000)
    cli_service.store.set_history(
        [
            HistoryEntry(
                id="s-2",
                title="Review",
                project="Acme",
                tags=["review"],
                started_at=now - 60_000,
                ended_at=now + 29 * 60_000,
                duration_ms=30 * 60_000,
                mode="open",
            ),
            HistoryEntry(
                id="s-1",
                title="Pomodoro",
                project="beta",
                tags=["deep", "review"],
                started_at=now - 120_000,
                ended_at=now + 48 * 60_000,
                duration_ms=50 * 60_000,
                mode="pomodoro",
                pomodoro_cycles=2,
            ),
            HistoryEntry(
                id="s-0",
                title="Ancient",
                started_at=0,
                ended_at=60_000,
                duration_ms=60_000,
                mode="open",
            ),
        ]
    )
    return cli_service


# ---------------------------------------------------------------------------
# history
# ---------------------------------------------------------------------------


class TestHistoryList:
    def test_empty(self, cli_service):
        result = runner.invoke(app, ["history", "list"])
        assert result.exit_code == 0
        assert "No sessions logged yet" in result.output

    def test_json(self, seeded):
        result = runner.invoke(app, ["history", "list", "-o", "json"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert [row["id"] for row in rows] == ["s-2", "s-1", "s-0"]
        assert rows[1]["cycles"] == 2

    def test_limit(self, seeded):
        result = runner.invoke(app, ["history", "list", "-n", "1", "-o", "json"])
        assert [row["id"] for row in json.loads(result.output)] == ["s-2"]

    def test_table(self, seeded):
        result = runner.invoke(app, ["history", "list"])
        assert result.exit_code == 0


class TestHistoryEdit:
    def test_edit_project_keeps_tags(self, seeded):
        result = runner.invoke(app, ["history", "edit", "s-2", "--project", "Gamma"])

        assert result.exit_code == 0, result.output
        entry = seeded.get_history()[0]
        assert entry.project == "Gamma"
        assert entry.tags == ["review"]

    def test_edit_clears_with_empty_values(self, seeded):
        result = runner.invoke(
            app, ["history", "edit", "s-1", "--project", "", "--tags", ""]
        )

        assert result.exit_code == 0, result.output
        entry = seeded.get_history()[1]
        assert entry.project is None
        assert entry.tags is None

    def test_edit_missing(self, seeded):
        result = runner.invoke(app, ["history", "edit", "nope", "-p", "x"])
        assert result.exit_code == ERROR_NOT_FOUND
        assert "Session not found" in result.output


class TestHistoryDelete:
    def test_delete(self, seeded):
        result = runner.invoke(app, ["history", "delete", "s-1", "--yes"])
        assert result.exit_code == 0
        assert [e.id for e in seeded.get_history()] == ["s-2", "s-0"]

    def test_delete_declined(self, seeded):
        result = runner.invoke(app, ["history", "delete", "s-1"], input="n\n")
        assert result.exit_code == 0
        assert len(seeded.get_history()) == 3

    def test_delete_missing(self, seeded):
        result = runner.invoke(app, ["history", "delete", "nope", "--yes"])
        assert result.exit_code == ERROR_NOT_FOUND

    def test_clear(self, seeded):
        result = runner.invoke(app, ["history", "clear", "--yes"])
        assert result.exit_code == 0
        assert "Removed 3 session(s)" in result.output
        assert seeded.get_history() == []


class TestProjectsAndTags:
    def test_projects(self, seeded):
        result = runner.invoke(app, ["history", "projects", "-o", "json"])
        assert json.loads(result.output) == ["Acme", "beta"]

    def test_tags(self, seeded):
        result = runner.invoke(app, ["history", "tags"])
        assert result.exit_code == 0
        assert result.output.split() == ["deep", "review"]

    def test_no_projects(self, cli_service):
        result = runner.invoke(app, ["history", "projects"])
        assert "No projects yet" in result.output


# ---------------------------------------------------------------------------
# summary
# ---------------------------------------------------------------------------


class TestSummary:
    def test_this_week_json(self, seeded):
        result = runner.invoke(app, ["summary", "-o", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["period"] == "this-week"
        assert data["sessions"] == 2
        assert data["total_ms"] == 80 * 60_000
        assert [p["project"] for p in data["projects"]] == ["beta", "Acme"]

    def test_table(self, seeded):
        result = runner.invoke(app, ["summary", "--period", "this-month"])
        assert result.exit_code == 0
        assert "beta" in result.output
        assert "1h 20m" in result.output

    def test_empty_period(self, seeded):
        result = runner.invoke(app, ["summary", "--period", "last-week"])
        assert result.exit_code == 0
        assert "No sessions between" in result.output

    def test_unknown_period(self, cli_service):
        result = runner.invoke(app, ["summary", "--period", "fortnight"])
        assert result.exit_code == ERROR_INVALID_ARGS


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


class TestExport:
    def test_csv_stdout(self, seeded):
        result = runner.invoke(app, ["export", "csv"])

        assert result.exit_code == 0, result.output
        rows = list(csv.reader(io.StringIO(result.output)))
        assert rows[0] == CSV_HEADER
        assert len(rows) == 4

    def test_csv_period_filter(self, seeded):
        result = runner.invoke(app, ["export", "csv", "--period", "this-week"])
        rows = list(csv.reader(io.StringIO(result.output)))
        assert [row[0] for row in rows[1:]] == ["Review", "Pomodoro"]

    def test_json_to_file(self, seeded, tmp_path):
        target = tmp_path / "sessions.json"
        result = runner.invoke(app, ["export", "json", "-f", str(target)])

        assert result.exit_code == 0, result.output
        assert "Exported 3 session(s)" in result.output
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data[0]["id"] == "s-2"
        assert data[1]["pomodoroCycles"] == 2

    def test_bad_period(self, seeded):
        result = runner.invoke(app, ["export", "json", "--period", "someday"])
        assert result.exit_code == ERROR_INVALID_ARGS
