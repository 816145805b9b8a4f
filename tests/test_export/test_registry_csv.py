"""Tests for the registry CSV export."""

import csv
import io
from datetime import datetime, timedelta, timezone

import pytest

from outcome_registry.analytics import analyze
from outcome_registry.export import (
    REGISTRY_COLUMNS,
    RegistryExportFilters,
    project_registry_rows,
    registry_filename,
    registry_to_csv,
)
from outcome_registry.models.filters import Filters


@pytest.fixture
def working_set(sample_records, catalog, as_of):
    return analyze(sample_records, Filters(), as_of, catalog)


def _parse(text):
    return list(csv.DictReader(io.StringIO(text)))


class TestProjectRegistryRows:
    """Tests for project_registry_rows."""

    def test_one_row_per_target_and_instrument(self, working_set):
        rows = project_registry_rows(working_set.outcome_targets)

        assert [(r.care_target_id, r.instrument_code) for r in rows] == [
            ("ct-1", "ODI"),
            ("ct-2", "ODI"),
            ("ct-3", "LEFS"),
            ("ct-5", None),
        ]

    def test_override_rows_only_with_all_targets(self, working_set):
        rows = project_registry_rows(working_set.all_targets)
        override_row = next(r for r in rows if r.care_target_id == "ct-4")

        assert override_row.data_quality_status == "override"
        assert override_row.override_reason == "Patient declined discharge survey"
        assert override_row.outcome_classification == "incomplete"

    def test_row_contents(self, working_set):
        row = project_registry_rows(working_set.outcome_targets)[0]

        assert row.episode_type == "musculoskeletal"
        assert row.duration_days == 10
        assert row.raw_delta == 20
        assert row.mcid_threshold == 10
        assert row.outcome_classification == "improved"
        assert row.mcid_achieved is True
        assert row.data_quality_status == "complete"
        assert row.episode_year == 2026
        assert row.episode_quarter == 2

    def test_export_filters(self, working_set):
        targets = working_set.outcome_targets

        mcid_only = project_registry_rows(targets, RegistryExportFilters(mcid_achieved_only=True))
        assert [r.care_target_id for r in mcid_only] == ["ct-1", "ct-3"]

        complete_only = project_registry_rows(targets, RegistryExportFilters(complete_data_only=True))
        assert [r.care_target_id for r in complete_only] == ["ct-1", "ct-2", "ct-3"]

        lefs = project_registry_rows(targets, RegistryExportFilters(instrument_code="lefs"))
        assert [r.care_target_id for r in lefs] == ["ct-3"]

        assert project_registry_rows(targets, RegistryExportFilters(year=2025)) == []
        assert project_registry_rows(targets, RegistryExportFilters(quarter=1)) == []
        assert len(project_registry_rows(targets, RegistryExportFilters(year=2026, quarter=2))) == 4

    def test_clinic_filter(self, working_set):
        targets = working_set.outcome_targets

        clinic = project_registry_rows(targets, RegistryExportFilters(clinic_id="clinic-1"))
        assert len(clinic) == 4
        assert project_registry_rows(targets, RegistryExportFilters(clinic_id="clinic-2")) == []

    def test_quarter_must_be_valid(self):
        with pytest.raises(ValueError):
            RegistryExportFilters(quarter=5)


class TestRegistryToCSV:
    """Tests for registry_to_csv."""

    def test_header_and_quoting(self, working_set):
        text = registry_to_csv(project_registry_rows(working_set.outcome_targets))
        lines = text.split("\n")

        assert lines[0] == ",".join(f'"{c}"' for c in REGISTRY_COLUMNS)
        assert len(lines) == 5
        assert not text.endswith("\n")
        assert all(line.startswith('"') and line.endswith('"') for line in lines)

    def test_values_parse_back(self, working_set):
        rows = project_registry_rows(working_set.outcome_targets)
        parsed = _parse(registry_to_csv(rows))

        assert len(parsed) == len(rows)
        first = parsed[0]
        assert first["care_target_id"] == "ct-1"
        assert float(first["baseline_score"]) == rows[0].baseline_score
        assert float(first["raw_delta"]) == rows[0].raw_delta
        assert first["mcid_achieved"] == "true"
        assert first["care_target_start_date"] == "2026-05-01"
        assert first["discharge_date"] == "2026-05-11"

        worsened = parsed[1]
        assert worsened["mcid_achieved"] == "false"
        assert float(worsened["raw_delta"]) == -4

    def test_missing_values_are_empty(self, working_set):
        parsed = _parse(registry_to_csv(project_registry_rows(working_set.outcome_targets)))
        no_scores = parsed[-1]

        assert no_scores["care_target_id"] == "ct-5"
        assert no_scores["instrument_code"] == ""
        assert no_scores["baseline_score"] == ""
        assert no_scores["discharge_date"] == ""
        assert no_scores["mcid_achieved"] == ""
        assert no_scores["data_quality_status"] == "incomplete"

    def test_embedded_quotes_doubled(self, make_episode, make_target, catalog, as_of):
        from outcome_registry.analytics import load_records

        records = load_records([make_episode()], [make_target(name='Knee "clicking", left')])
        rows = project_registry_rows(analyze(records, Filters(), as_of, catalog).outcome_targets)
        text = registry_to_csv(rows)

        assert '"Knee ""clicking"", left"' in text
        assert _parse(text)[0]["care_target_name"] == 'Knee "clicking", left'

    def test_empty_export_is_header_only(self):
        assert registry_to_csv([]) == ",".join(f'"{c}"' for c in REGISTRY_COLUMNS)


class TestRegistryFilename:
    def test_utc_timestamp(self):
        now = datetime(2026, 6, 30, 14, 5, 9, tzinfo=timezone.utc)
        assert registry_filename(now) == "registry-export-20260630T140509Z.csv"

    def test_converts_to_utc(self):
        now = datetime(2026, 6, 30, 9, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert registry_filename(now) == "registry-export-20260630T140000Z.csv"

    def test_naive_treated_as_utc(self):
        assert registry_filename(datetime(2026, 1, 2, 3, 4, 5)) == "registry-export-20260102T030405Z.csv"
