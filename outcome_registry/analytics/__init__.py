"""Outcome registry analytics: selection, classification and aggregation."""

from outcome_registry.analytics.classifier import (
    classify_care_target,
    classify_care_target_outcomes,
    classify_outcome,
    select_baseline,
    select_discharge,
)
from outcome_registry.analytics.engine import (
    LeadershipAnalytics,
    aggregate,
    analyze,
    compute_dashboard,
    compute_dashboard_from_snapshot,
    utc_now,
)
from outcome_registry.analytics.integrity import classify_integrity, integrity_band
from outcome_registry.analytics.loader import RawSnapshot, RecordSet, load_records, load_snapshot
from outcome_registry.analytics.mcid import (
    calculate_mcid_achievement,
    collect_mcid_achievements,
    summarize_mcid,
)
from outcome_registry.analytics.selector import SelectedRecords, select_records
from outcome_registry.analytics.working_set import WorkingSet, build_working_set

__all__ = [
    "LeadershipAnalytics",
    "RawSnapshot",
    "RecordSet",
    "SelectedRecords",
    "WorkingSet",
    "aggregate",
    "analyze",
    "build_working_set",
    "calculate_mcid_achievement",
    "classify_care_target",
    "classify_care_target_outcomes",
    "classify_integrity",
    "classify_outcome",
    "collect_mcid_achievements",
    "compute_dashboard",
    "compute_dashboard_from_snapshot",
    "integrity_band",
    "load_records",
    "load_snapshot",
    "select_baseline",
    "select_discharge",
    "select_records",
    "summarize_mcid",
    "utc_now",
]
