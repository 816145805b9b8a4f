"""Outcomes aggregator.

Everything is reported per instrument code. Deltas from different
instruments live on different scales and are never pooled; the overall
figures are counts of classified outcomes, not blended scores.
"""

from collections import defaultdict

from outcome_registry.analytics.stats import median, percentage
from outcome_registry.analytics.working_set import WorkingSet
from outcome_registry.models.metrics import InstrumentOutcomeSeries, OutcomeMetrics
from outcome_registry.models.outcomes import Classification


def compute_outcomes(working_set: WorkingSet) -> OutcomeMetrics:
    """Improvement and MCID achievement, one series per instrument."""
    counts: dict[str, dict[Classification, int]] = defaultdict(lambda: defaultdict(int))
    deltas: dict[str, list[float]] = defaultdict(list)
    mcid_by_instrument: dict[str, int] = defaultdict(int)
    without_scores = 0

    for target in working_set.outcome_targets:
        if not target.has_scores:
            without_scores += 1
            continue
        for code, outcome in target.outcomes.items():
            counts[code][outcome.classification] += 1
            if outcome.raw_delta is not None:
                deltas[code].append(outcome.raw_delta)
            if outcome.mcid_achieved:
                mcid_by_instrument[code] += 1

    by_instrument = {}
    for code in sorted(counts):
        series = counts[code]
        by_instrument[code] = InstrumentOutcomeSeries(
            improved=series[Classification.IMPROVED],
            worsened=series[Classification.WORSENED],
            unchanged=series[Classification.UNCHANGED],
            incomplete=series[Classification.INCOMPLETE],
            mcid_achieved=mcid_by_instrument[code],
            median_delta=median(deltas[code]),
            n=len(deltas[code]),
        )

    total_with_outcomes = sum(
        s.improved + s.worsened + s.unchanged for s in by_instrument.values()
    )
    improved = sum(s.improved for s in by_instrument.values())
    mcid_achieved = sum(s.mcid_achieved for s in by_instrument.values())

    return OutcomeMetrics(
        total_with_outcomes=total_with_outcomes,
        improved_count=improved,
        improved_percentage=percentage(improved, total_with_outcomes),
        mcid_achieved_count=mcid_achieved,
        mcid_percentage=percentage(mcid_achieved, total_with_outcomes),
        care_targets_without_scores=without_scores,
        by_instrument=by_instrument,
    )
