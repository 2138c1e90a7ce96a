"""End-to-end tests of the insight CLI against a sample snapshot store."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from insight_cli.main import app

runner = CliRunner()

AS_OF = "2026-03-31"


@pytest.fixture
def store_args(sample_db_path):
    return ["--database", str(sample_db_path), "--as-of", AS_OF]


def _exported(tmp_path, *args):
    target = tmp_path / "report.json"
    result = runner.invoke(app, [*args, "--export", str(target)])
    assert result.exit_code == 0, result.output
    return json.loads(target.read_text())


class TestStoreCommands:
    def test_init_db_with_sample(self, tmp_path):
        db_path = tmp_path / "data" / "workforce.duckdb"
        result = runner.invoke(app, ["init-db", "--database", str(db_path), "--sample"])

        assert result.exit_code == 0, result.output
        assert db_path.exists()
        assert "Snapshot store ready" in result.output

    def test_init_db_empty(self, tmp_path):
        db_path = tmp_path / "empty.duckdb"
        result = runner.invoke(app, ["init-db", "--database", str(db_path)])

        assert result.exit_code == 0, result.output
        result = runner.invoke(app, ["departments", "--database", str(db_path), "--as-of", AS_OF])
        assert result.exit_code == 0, result.output

    def test_validate_clean_store(self, sample_db_path):
        result = runner.invoke(app, ["validate", "--database", str(sample_db_path)])

        assert result.exit_code == 0, result.output
        assert "No integrity issues" in result.output

    def test_validate_missing_store(self, tmp_path):
        result = runner.invoke(app, ["validate", "--database", str(tmp_path / "nope.duckdb")])
        assert result.exit_code == 1


class TestReportCommands:
    def test_departments_export(self, tmp_path, store_args):
        payload = _exported(tmp_path, "departments", *store_args)

        assert payload["report"] == "department_metrics"
        assert payload["as_of"] == AS_OF
        assert [row["department_id"] for row in payload["rows"]] == [1, 2, 3, 4, 5]
        it = payload["rows"][1]
        assert it["headcount"] == 4

    def test_compensation_out_earning(self, tmp_path, store_args):
        payload = _exported(tmp_path, "compensation", "out-earning", *store_args)
        assert [row["employee_id"] for row in payload["rows"]] == [7, 9, 10]

    def test_projects_idle(self, tmp_path, store_args):
        payload = _exported(tmp_path, "projects", "idle", *store_args)
        assert [row["employee_id"] for row in payload["rows"]] == [5, 6, 10]

    def test_projects_multi_threshold(self, tmp_path, store_args):
        payload = _exported(tmp_path, "projects", "multi", "--min-projects", "1", *store_args)
        assert len(payload["rows"]) == 7

    def test_leave_all(self, tmp_path, store_args):
        payload = _exported(tmp_path, "leave", "--all", *store_args)
        assert [row["employee_id"] for row in payload["rows"]] == [1, 3, 9]

    def test_employees_csv_export(self, tmp_path, store_args):
        target = tmp_path / "employees.csv"
        result = runner.invoke(app, ["employees", *store_args, "--export", str(target)])

        assert result.exit_code == 0, result.output
        header = target.read_text().splitlines()[0]
        assert header.startswith("employee_id,")

    def test_employee_detail(self, store_args):
        result = runner.invoke(app, ["employee", "7", *store_args])

        assert result.exit_code == 0, result.output
        assert "Daniel Martinez" in result.output

    def test_unknown_employee(self, store_args):
        result = runner.invoke(app, ["employee", "404", *store_args])
        assert result.exit_code == 1

    def test_config_file_applies(self, tmp_path, store_args, config_file):
        payload = _exported(tmp_path, "leave", "--config", str(config_file), *store_args)
        assert len(payload["rows"]) == 3

    @pytest.mark.parametrize("command", ["compensation", "projects"])
    def test_unknown_report_name(self, command, store_args):
        result = runner.invoke(app, [command, "bogus", *store_args])
        assert result.exit_code == 1

    def test_missing_database(self, tmp_path):
        result = runner.invoke(
            app, ["departments", "--database", str(tmp_path / "absent.duckdb"), "--as-of", AS_OF]
        )
        assert result.exit_code == 1

    def test_since_after_as_of(self, store_args):
        result = runner.invoke(app, ["attendance", "--since", "2026-04-01", *store_args])
        assert result.exit_code == 1


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "Workforce Insight Engine v" in result.output
