"""Record selector: applies dashboard filters to a record set.

The reference time is always passed in. Nothing here reads the wall clock, so
two calls with the same ``as_of`` and the same records agree.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from outcome_registry.analytics.loader import RecordSet
from outcome_registry.models.filters import Filters
from outcome_registry.models.records import CareTarget, Episode, OutcomeScore


@dataclass(frozen=True)
class SelectedRecords:
    """Filtered working set shared by every aggregator.

    ``care_targets`` keeps override-flagged targets (caseload views);
    ``outcome_care_targets`` drops them unless overrides are included
    (outcome-validity views).
    """

    filters: Filters
    as_of: datetime
    episodes: tuple[Episode, ...] = ()
    care_targets: tuple[CareTarget, ...] = ()
    outcome_care_targets: tuple[CareTarget, ...] = ()
    scores_by_target: Mapping[str, tuple[OutcomeScore, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    episodes_by_id: Mapping[str, Episode] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def scores_for(self, care_target_id: str) -> tuple[OutcomeScore, ...]:
        return self.scores_by_target.get(care_target_id, ())

    def episode_for(self, care_target: CareTarget) -> Episode:
        return self.episodes_by_id[care_target.episode_id]


def _matches(care_target: CareTarget, filters: Filters) -> bool:
    if filters.domain and care_target.domain != filters.domain:
        return False
    if filters.body_region and care_target.body_region != filters.body_region:
        return False
    return True


def select_records(records: RecordSet, filters: Filters, as_of: datetime) -> SelectedRecords:
    """Apply ``filters`` to ``records`` relative to the reference time ``as_of``."""
    cutoff = filters.time_window.cutoff(as_of)

    episodes: dict[str, Episode] = {}
    for episode in records.episodes:
        if cutoff is not None and episode.start_date < cutoff:
            continue
        if filters.clinician_id and episode.clinician_id != filters.clinician_id:
            continue
        episodes[episode.id] = episode

    care_targets = [
        ct for ct in records.care_targets if ct.episode_id in episodes and _matches(ct, filters)
    ]

    # With a target-level filter, episodes left without a matching target drop out
    if filters.domain or filters.body_region:
        kept = {ct.episode_id for ct in care_targets}
        episodes = {eid: ep for eid, ep in episodes.items() if eid in kept}

    outcome_care_targets = [
        ct for ct in care_targets if filters.include_overrides or not ct.override
    ]

    target_ids = {ct.id for ct in care_targets}
    grouped: dict[str, list[OutcomeScore]] = defaultdict(list)
    for score in records.scores:
        if score.care_target_id in target_ids:
            grouped[score.care_target_id].append(score)

    return SelectedRecords(
        filters=filters,
        as_of=as_of,
        episodes=tuple(episodes.values()),
        care_targets=tuple(care_targets),
        outcome_care_targets=tuple(outcome_care_targets),
        scores_by_target=MappingProxyType({k: tuple(v) for k, v in grouped.items()}),
        episodes_by_id=MappingProxyType(dict(episodes)),
    )
