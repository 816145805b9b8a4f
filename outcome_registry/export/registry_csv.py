"""Registry export: flat CSV rows for research and registry submissions.

One row per (care target, instrument). A care target with no scores still
gets a single row with blank instrument columns, so a registry where every
complaint uses one instrument has exactly one row per care target.
"""

from __future__ import annotations

import csv
import io
import math
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from outcome_registry.models.outcomes import ClassifiedCareTarget, ClassifiedOutcome, IntegrityStatus


class RegistryRow(BaseModel):
    """A single registry row. Field order is the CSV column order."""

    care_target_id: str
    episode_id: str
    clinic_id: Optional[str] = None
    clinician_id: Optional[str] = None
    care_target_name: str = ""
    domain: Optional[str] = None
    body_region: Optional[str] = None
    episode_type: str
    care_target_start_date: date
    discharge_date: Optional[date] = None
    duration_days: Optional[int] = None
    discharge_reason: Optional[str] = None
    instrument_code: Optional[str] = None
    baseline_score: Optional[float] = None
    discharge_score: Optional[float] = None
    raw_delta: Optional[float] = None
    mcid_threshold: Optional[float] = None
    outcome_classification: Optional[str] = None
    mcid_achieved: Optional[bool] = None
    data_quality_status: str
    override_reason: Optional[str] = None
    episode_year: int
    episode_quarter: int


REGISTRY_COLUMNS: tuple[str, ...] = tuple(RegistryRow.model_fields)


class RegistryExportFilters(BaseModel):
    """Row filters offered by the registry export panel."""

    year: Optional[int] = None
    quarter: Optional[int] = Field(default=None, ge=1, le=4)
    instrument_code: Optional[str] = None
    clinic_id: Optional[str] = None
    mcid_achieved_only: bool = False
    complete_data_only: bool = False

    def accepts(self, row: RegistryRow) -> bool:
        if self.year is not None and row.episode_year != self.year:
            return False
        if self.quarter is not None and row.episode_quarter != self.quarter:
            return False
        if self.instrument_code and (row.instrument_code or "").upper() != self.instrument_code.upper():
            return False
        if self.clinic_id and row.clinic_id != self.clinic_id:
            return False
        if self.mcid_achieved_only and row.mcid_achieved is not True:
            return False
        if self.complete_data_only and row.data_quality_status != IntegrityStatus.COMPLETE.value:
            return False
        return True


def _row(target: ClassifiedCareTarget, outcome: Optional[ClassifiedOutcome]) -> RegistryRow:
    ct = target.care_target
    episode_start = target.episode.start_date
    return RegistryRow(
        care_target_id=ct.id,
        episode_id=ct.episode_id,
        clinic_id=target.episode.clinic_id,
        clinician_id=target.episode.clinician_id,
        care_target_name=ct.name,
        domain=ct.domain,
        body_region=ct.body_region,
        episode_type=target.episode.type.value,
        care_target_start_date=ct.start_date,
        discharge_date=ct.discharge_date,
        duration_days=ct.duration_days,
        discharge_reason=ct.discharge_reason,
        instrument_code=outcome.instrument_code if outcome else None,
        baseline_score=outcome.baseline_score if outcome else None,
        discharge_score=outcome.discharge_score if outcome else None,
        raw_delta=outcome.raw_delta if outcome else None,
        mcid_threshold=outcome.mcid_threshold if outcome else None,
        outcome_classification=outcome.classification.value if outcome else None,
        mcid_achieved=outcome.mcid_achieved if outcome else None,
        data_quality_status=target.integrity_status.value,
        override_reason=ct.override_reason,
        episode_year=episode_start.year,
        episode_quarter=(episode_start.month - 1) // 3 + 1,
    )


def project_registry_rows(
    targets: Iterable[ClassifiedCareTarget],
    filters: Optional[RegistryExportFilters] = None,
) -> list[RegistryRow]:
    """Flatten classified care targets into registry rows."""
    rows: list[RegistryRow] = []
    for target in targets:
        if target.outcomes:
            candidates = [_row(target, target.outcomes[code]) for code in sorted(target.outcomes)]
        else:
            candidates = [_row(target, None)]
        rows.extend(r for r in candidates if filters is None or filters.accepts(r))
    return rows


def _format_value(value: Any) -> str:
    """Render a cell; missing and non-finite numbers become empty strings."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return "" if math.isnan(value) or math.isinf(value) else str(value)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def registry_to_csv(rows: Iterable[RegistryRow]) -> str:
    """Serialize rows: header first, every value quoted, rows joined with ``\\n``."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(REGISTRY_COLUMNS)
    for row in rows:
        writer.writerow([_format_value(getattr(row, column)) for column in REGISTRY_COLUMNS])
    return buffer.getvalue().rstrip("\n")


def registry_filename(now: datetime, prefix: str = "registry-export") -> str:
    """Download filename carrying a UTC timestamp."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return f"{prefix}-{now.astimezone(timezone.utc):%Y%m%dT%H%M%SZ}.csv"
