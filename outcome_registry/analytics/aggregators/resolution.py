"""Resolution aggregator: discharge status facts.

Labels say "discharged" throughout. Discharge is a status, not a judgment
about whether care succeeded.
"""

from collections import Counter

from outcome_registry.analytics.aggregators.volume import UNKNOWN
from outcome_registry.analytics.stats import percentage
from outcome_registry.analytics.working_set import WorkingSet
from outcome_registry.models.metrics import DomainDischargeRate, ResolutionMetrics

NOT_SPECIFIED = "Not specified"
TOP_REASONS = 5


def compute_resolution(working_set: WorkingSet, top_reasons: int = TOP_REASONS) -> ResolutionMetrics:
    """Discharge counts by domain and the most common discharge reasons."""
    care_targets = [t.care_target for t in working_set.outcome_targets]
    discharged = [ct for ct in care_targets if ct.is_discharged]

    totals: Counter[str] = Counter(ct.domain or UNKNOWN for ct in care_targets)
    discharged_by_domain: Counter[str] = Counter(ct.domain or UNKNOWN for ct in discharged)
    by_domain = {
        domain: DomainDischargeRate(
            discharged=discharged_by_domain[domain],
            total=total,
            rate=percentage(discharged_by_domain[domain], total),
        )
        for domain, total in sorted(totals.items())
    }

    reasons: Counter[str] = Counter(ct.discharge_reason or NOT_SPECIFIED for ct in discharged)
    # Most frequent first, ties by reason name
    top = sorted(reasons.items(), key=lambda item: (-item[1], item[0]))[:top_reasons]

    return ResolutionMetrics(
        total_care_targets=len(care_targets),
        total_discharged=len(discharged),
        discharged_percentage=percentage(len(discharged), len(care_targets)),
        discharge_rate_by_domain=by_domain,
        discharge_reason_distribution=dict(top),
    )
