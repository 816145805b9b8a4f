"""Leadership analytics, MCID and registry export endpoints.

Each request carries its own record snapshot. ``as_of`` pins the reference
time for the time window; when omitted it is taken once here and echoed back
so callers can reproduce the numbers.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field

from outcome_registry.analytics import (
    LeadershipAnalytics,
    RawSnapshot,
    analyze,
    collect_mcid_achievements,
    compute_dashboard,
    load_snapshot,
    summarize_mcid,
    utc_now,
)
from outcome_registry.api.dependencies import (
    catalog_dependency,
    recorder_dependency,
    settings_dependency,
)
from outcome_registry.api.middleware import REJECTED_RECORDS_HEADER
from outcome_registry.config import Settings
from outcome_registry.export import (
    RegistryExportFilters,
    project_registry_rows,
    registry_filename,
    registry_to_csv,
)
from outcome_registry.instruments import InstrumentCatalog
from outcome_registry.models.filters import Filters
from outcome_registry.models.metrics import MCID_DISCLAIMER
from outcome_registry.models.outcomes import MCIDSummary
from outcome_registry.observability import DiagnosticEvent, DiagnosticsRecorder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics")


class AnalyticsRequest(BaseModel):
    records: RawSnapshot = Field(default_factory=RawSnapshot)
    filters: Optional[Filters] = None
    as_of: Optional[datetime] = None


class RegistryExportRequest(AnalyticsRequest):
    export: RegistryExportFilters = Field(default_factory=RegistryExportFilters)


class MCIDReport(BaseModel):
    as_of: datetime
    summary: MCIDSummary
    mcid_disclaimer: str = MCID_DISCLAIMER
    diagnostics: list[DiagnosticEvent] = Field(default_factory=list)


def _resolve(payload: AnalyticsRequest, settings: Settings) -> tuple[Filters, datetime]:
    filters = payload.filters or Filters(
        time_window=settings.default_time_window,
        include_overrides=settings.default_include_overrides,
    )
    return filters, payload.as_of or utc_now()


@router.post("/leadership", response_model=LeadershipAnalytics, response_model_by_alias=False)
def leadership_analytics(
    payload: AnalyticsRequest,
    response: Response,
    catalog: InstrumentCatalog = Depends(catalog_dependency),
    recorder: DiagnosticsRecorder = Depends(recorder_dependency),
    settings: Settings = Depends(settings_dependency),
) -> LeadershipAnalytics:
    """Volume, resolution, time, outcomes, complexity and integrity metrics."""
    filters, as_of = _resolve(payload, settings)
    records = load_snapshot(payload.records, recorder)
    response.headers[REJECTED_RECORDS_HEADER] = str(len(records.rejected))
    return compute_dashboard(
        records,
        filters,
        as_of,
        catalog=catalog,
        recorder=recorder,
        top_reasons=settings.registry_top_reasons,
    )


@router.post("/mcid", response_model=MCIDReport)
def mcid_report(
    payload: AnalyticsRequest,
    response: Response,
    catalog: InstrumentCatalog = Depends(catalog_dependency),
    recorder: DiagnosticsRecorder = Depends(recorder_dependency),
    settings: Settings = Depends(settings_dependency),
) -> MCIDReport:
    """MCID achievement cards for every care target/instrument with complete data."""
    filters, as_of = _resolve(payload, settings)
    with recorder.run("mcid report"):
        records = load_snapshot(payload.records, recorder)
        working_set = analyze(records, filters, as_of, catalog, recorder)
        achievements = collect_mcid_achievements(working_set.outcome_targets, catalog)

    response.headers[REJECTED_RECORDS_HEADER] = str(len(records.rejected))
    return MCIDReport(
        as_of=as_of,
        summary=summarize_mcid(achievements),
        diagnostics=list(recorder.events),
    )


@router.post("/registry-export")
def registry_export(
    payload: RegistryExportRequest,
    catalog: InstrumentCatalog = Depends(catalog_dependency),
    recorder: DiagnosticsRecorder = Depends(recorder_dependency),
    settings: Settings = Depends(settings_dependency),
) -> Response:
    """Flat registry CSV, one row per care target and instrument."""
    filters, as_of = _resolve(payload, settings)
    with recorder.run("registry export"):
        records = load_snapshot(payload.records, recorder)
        working_set = analyze(records, filters, as_of, catalog, recorder)
        rows = project_registry_rows(working_set.outcome_targets, payload.export)

    filename = registry_filename(utc_now())
    logger.info(f"[{recorder.request_id}] Registry export: {len(rows)} rows -> {filename}")
    return Response(
        content=registry_to_csv(rows),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Row-Count": str(len(rows)),
            "X-As-Of": as_of.isoformat(),
            REJECTED_RECORDS_HEADER: str(len(records.rejected)),
        },
    )
