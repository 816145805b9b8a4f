"""Tests for CLI commands."""

import csv
import io
import json

import pytest
from typer.testing import CliRunner

from outcome_registry.cli.commands import app

runner = CliRunner()

AS_OF = "2026-06-30T12:00:00+00:00"


@pytest.fixture
def snapshot_file(tmp_path, sample_snapshot):
    """Write the sample snapshot to a JSON file."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(sample_snapshot))
    return path


class TestDashboardCommand:
    """Tests for the dashboard command."""

    def test_json_output(self, snapshot_file):
        result = runner.invoke(app, ["dashboard", str(snapshot_file), "--window", "all", "--as-of", AS_OF, "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["volume"]["episodes_opened"] == 2
        assert data["resolution"]["total_discharged"] == 2
        assert data["outcomes"]["by_instrument"]["ODI"]["mcid_achieved"] == 1
        assert data["as_of"].startswith("2026-06-30T12:00:00")

    def test_filters_applied(self, snapshot_file):
        result = runner.invoke(
            app,
            ["dashboard", str(snapshot_file), "-w", "all", "--domain", "lower_extremity", "--as-of", AS_OF, "--json"],
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["volume"]["episodes_opened"] == 1
        assert data["filters"]["domain"] == "lower_extremity"

    def test_rich_output(self, snapshot_file):
        result = runner.invoke(app, ["dashboard", str(snapshot_file), "--window", "all", "--as-of", AS_OF])

        assert result.exit_code == 0
        assert "Volume" in result.output
        assert "Time to Resolution" in result.output
        assert "Integrity" in result.output
        assert "ODI" in result.output

    def test_invalid_window(self, snapshot_file):
        result = runner.invoke(app, ["dashboard", str(snapshot_file), "--window", "7d"])

        assert result.exit_code == 1
        assert "Invalid window" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["dashboard", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Snapshot file not found" in result.output

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = runner.invoke(app, ["dashboard", str(path)])

        assert result.exit_code == 1


class TestExportCommand:
    """Tests for the export command."""

    def test_writes_csv(self, snapshot_file, tmp_path):
        output = tmp_path / "registry.csv"

        result = runner.invoke(
            app, ["export", str(snapshot_file), "-o", str(output), "--window", "all", "--as-of", AS_OF]
        )

        assert result.exit_code == 0
        assert "Exported 3 records" in result.output
        rows = list(csv.DictReader(io.StringIO(output.read_text())))
        assert [r["care_target_id"] for r in rows] == ["ct-1", "ct-2", "ct-3"]

    def test_mcid_only(self, snapshot_file, tmp_path):
        output = tmp_path / "registry.csv"

        result = runner.invoke(
            app,
            ["export", str(snapshot_file), "-o", str(output), "-w", "all", "--as-of", AS_OF, "--mcid-only"],
        )

        assert result.exit_code == 0
        rows = list(csv.DictReader(io.StringIO(output.read_text())))
        assert [r["care_target_id"] for r in rows] == ["ct-1"]

    def test_no_matching_rows(self, snapshot_file, tmp_path):
        output = tmp_path / "registry.csv"

        result = runner.invoke(
            app, ["export", str(snapshot_file), "-o", str(output), "-w", "all", "--as-of", AS_OF, "--year", "2019"]
        )

        assert result.exit_code == 1
        assert "No records match" in result.output
        assert not output.exists()

    def test_clinic_filter(self, snapshot_file, tmp_path):
        output = tmp_path / "registry.csv"
        base = ["export", str(snapshot_file), "-o", str(output), "-w", "all", "--as-of", AS_OF]

        result = runner.invoke(app, base + ["--clinic", "c1"])
        assert result.exit_code == 0
        assert "Exported 3 records" in result.output

        output.unlink()
        result = runner.invoke(app, base + ["--clinic", "nowhere"])
        assert result.exit_code == 1
        assert "No records match" in result.output
        assert not output.exists()


class TestOtherCommands:
    def test_mcid(self, snapshot_file):
        result = runner.invoke(app, ["mcid", str(snapshot_file), "-w", "all", "--as-of", AS_OF])

        assert result.exit_code == 0
        assert "MCID Achievement" in result.output
        assert "ct-1" in result.output

    def test_instruments(self):
        result = runner.invoke(app, ["instruments"])

        assert result.exit_code == 0
        assert "ODI" in result.output
        assert "LEFS" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "outcome-registry v0.1.0" in result.output
