"""Integrity aggregator: baseline/discharge symmetry and overrides."""

from collections import defaultdict

from outcome_registry.analytics.stats import percentage
from outcome_registry.analytics.working_set import WorkingSet
from outcome_registry.models.metrics import IntegrityMetrics
from outcome_registry.models.outcomes import IntegrityStatus


def compute_integrity(working_set: WorkingSet) -> IntegrityMetrics:
    """Share of care targets with complete outcome data, and what is missing."""
    targets = working_set.outcome_targets
    status_counts: dict[IntegrityStatus, int] = defaultdict(int)
    attempted: dict[str, int] = defaultdict(int)
    missing: dict[str, int] = defaultdict(int)
    without_scores = 0

    for target in targets:
        status_counts[target.integrity_status] += 1
        if not target.has_scores:
            without_scores += 1
        for code, outcome in target.outcomes.items():
            attempted[code] += 1
            if not outcome.has_baseline_and_discharge:
                missing[code] += 1

    total = len(targets)
    complete = status_counts[IntegrityStatus.COMPLETE]
    override = status_counts[IntegrityStatus.OVERRIDE]
    incomplete = status_counts[IntegrityStatus.INCOMPLETE]

    return IntegrityMetrics(
        total_care_targets=total,
        complete_symmetry_count=complete,
        complete_symmetry_percentage=percentage(complete, total),
        override_count=override,
        override_percentage=percentage(override, total),
        incomplete_count=incomplete,
        incomplete_percentage=percentage(incomplete, total),
        care_targets_without_scores=without_scores,
        missingness_by_instrument={code: missing[code] for code in sorted(missing)},
        attempted_by_instrument={code: attempted[code] for code in sorted(attempted)},
    )
