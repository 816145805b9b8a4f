"""Analytics engine facade.

Runs the pipeline for one request-scoped snapshot:
loader -> selector -> classifiers -> aggregators. Every step is synchronous
and pure over its inputs; ``as_of`` pins the time window so repeated calls
are comparable.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from outcome_registry.analytics.aggregators import (
    compute_complexity,
    compute_integrity,
    compute_outcomes,
    compute_resolution,
    compute_time,
    compute_volume,
)
from outcome_registry.analytics.aggregators.resolution import TOP_REASONS
from outcome_registry.analytics.loader import RawSnapshot, RecordSet, load_snapshot
from outcome_registry.analytics.selector import select_records
from outcome_registry.analytics.working_set import WorkingSet, build_working_set
from outcome_registry.instruments import InstrumentCatalog, get_catalog
from outcome_registry.models.filters import Filters
from outcome_registry.models.metrics import (
    ComplexityMetrics,
    IntegrityMetrics,
    OutcomeMetrics,
    ResolutionMetrics,
    TimeMetrics,
    VolumeMetrics,
)
from outcome_registry.observability import DiagnosticEvent, DiagnosticsRecorder

logger = logging.getLogger(__name__)


class LeadershipAnalytics(BaseModel):
    """The six dashboard metrics objects for one filter set."""

    filters: Filters
    as_of: datetime
    volume: VolumeMetrics
    resolution: ResolutionMetrics
    time: TimeMetrics
    outcomes: OutcomeMetrics
    complexity: ComplexityMetrics
    integrity: IntegrityMetrics
    rejected_records: int = 0
    diagnostics: list[DiagnosticEvent] = Field(default_factory=list)


def utc_now() -> datetime:
    """Reference time for callers that do not pin one."""
    return datetime.now(timezone.utc)


def analyze(
    records: RecordSet,
    filters: Filters,
    as_of: datetime,
    catalog: Optional[InstrumentCatalog] = None,
    recorder: Optional[DiagnosticsRecorder] = None,
) -> WorkingSet:
    """Select and classify ``records``."""
    catalog = catalog or get_catalog()
    selected = select_records(records, filters, as_of)
    return build_working_set(selected, catalog, recorder)


def aggregate(working_set: WorkingSet, top_reasons: int = TOP_REASONS) -> dict[str, BaseModel]:
    """Run every aggregator; none depends on another's output."""
    return {
        "volume": compute_volume(working_set),
        "resolution": compute_resolution(working_set, top_reasons=top_reasons),
        "time": compute_time(working_set),
        "outcomes": compute_outcomes(working_set),
        "complexity": compute_complexity(working_set),
        "integrity": compute_integrity(working_set),
    }


def compute_dashboard(
    records: RecordSet,
    filters: Filters,
    as_of: datetime,
    catalog: Optional[InstrumentCatalog] = None,
    recorder: Optional[DiagnosticsRecorder] = None,
    top_reasons: int = TOP_REASONS,
) -> LeadershipAnalytics:
    """Compute all leadership metrics for ``records`` under ``filters``."""
    recorder = recorder or DiagnosticsRecorder()
    with recorder.run("leadership analytics"):
        working_set = analyze(records, filters, as_of, catalog, recorder)
        metrics = aggregate(working_set, top_reasons=top_reasons)

    logger.debug(
        f"Analytics over {len(working_set.episodes)} episodes, "
        f"{len(working_set.selected.care_targets)} care targets"
    )
    return LeadershipAnalytics(
        filters=filters,
        as_of=as_of,
        rejected_records=len(records.rejected),
        diagnostics=list(recorder.events),
        **metrics,
    )


def compute_dashboard_from_snapshot(
    snapshot: RawSnapshot,
    filters: Filters,
    as_of: datetime,
    catalog: Optional[InstrumentCatalog] = None,
    recorder: Optional[DiagnosticsRecorder] = None,
    top_reasons: int = TOP_REASONS,
) -> LeadershipAnalytics:
    """Validate raw rows, then compute the dashboard."""
    recorder = recorder or DiagnosticsRecorder()
    records = load_snapshot(snapshot, recorder)
    return compute_dashboard(records, filters, as_of, catalog, recorder, top_reasons)
