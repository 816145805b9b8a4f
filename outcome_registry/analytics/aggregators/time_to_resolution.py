"""Time-to-resolution aggregator."""

from collections import defaultdict

from outcome_registry.analytics.aggregators.volume import UNKNOWN
from outcome_registry.analytics.stats import median, percentile
from outcome_registry.analytics.working_set import WorkingSet
from outcome_registry.models.metrics import DomainDuration, TimeMetrics


def compute_time(working_set: WorkingSet) -> TimeMetrics:
    """Days from start to discharge for discharged care targets.

    Reports medians rather than means so a few long-running complaints do
    not skew the picture.
    """
    durations: list[int] = []
    by_domain: dict[str, list[int]] = defaultdict(list)

    for target in working_set.outcome_targets:
        days = target.care_target.duration_days
        if days is None:
            continue
        durations.append(days)
        by_domain[target.care_target.domain or UNKNOWN].append(days)

    return TimeMetrics(
        count=len(durations),
        median_days_to_resolution=median(durations),
        percentile_25=percentile(durations, 25),
        percentile_75=percentile(durations, 75),
        by_domain={
            domain: DomainDuration(median=median(values), count=len(values))
            for domain, values in sorted(by_domain.items())
        },
    )
