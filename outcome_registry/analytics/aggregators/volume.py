"""Volume aggregator: caseload counts."""

from collections import Counter

from outcome_registry.analytics.working_set import WorkingSet
from outcome_registry.models.metrics import VolumeMetrics
from outcome_registry.models.records import EpisodeStatus

UNKNOWN = "Unknown"


def compute_volume(working_set: WorkingSet) -> VolumeMetrics:
    """Count episodes and care targets in scope.

    Volume measures caseload, so override-flagged care targets are counted
    whatever the ``include_overrides`` filter says.
    """
    episodes = working_set.selected.episodes
    care_targets = working_set.selected.care_targets

    return VolumeMetrics(
        episodes_opened=len(episodes),
        episodes_closed=sum(1 for ep in episodes if ep.status == EpisodeStatus.CLOSED),
        care_targets_created=len(care_targets),
        care_targets_discharged=sum(1 for ct in care_targets if ct.is_discharged),
        episodes_by_type=dict(Counter(ep.type.value for ep in episodes)),
        care_targets_by_domain=dict(Counter(ct.domain or UNKNOWN for ct in care_targets)),
        care_targets_by_body_region=dict(
            Counter(ct.body_region or UNKNOWN for ct in care_targets)
        ),
    )
