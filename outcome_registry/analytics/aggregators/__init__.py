"""Metric aggregators. Each is an independent pure reduction over a working set."""

from outcome_registry.analytics.aggregators.complexity import (
    compute_complexity,
    is_staggered,
    resolution_span_days,
)
from outcome_registry.analytics.aggregators.integrity import compute_integrity
from outcome_registry.analytics.aggregators.outcomes import compute_outcomes
from outcome_registry.analytics.aggregators.resolution import compute_resolution
from outcome_registry.analytics.aggregators.time_to_resolution import compute_time
from outcome_registry.analytics.aggregators.volume import compute_volume

__all__ = [
    "compute_complexity",
    "compute_integrity",
    "compute_outcomes",
    "compute_resolution",
    "compute_time",
    "compute_volume",
    "is_staggered",
    "resolution_span_days",
]
