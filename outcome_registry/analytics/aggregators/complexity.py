"""Complexity aggregator: multi-complaint episodes and staggered resolution."""

from collections import defaultdict
from typing import Optional, Sequence

from outcome_registry.analytics.stats import median, percentage
from outcome_registry.analytics.working_set import WorkingSet
from outcome_registry.models.metrics import ComplexityMetrics, EpisodeComplexity
from outcome_registry.models.records import CareTarget


def resolution_span_days(care_targets: Sequence[CareTarget]) -> Optional[int]:
    """Days between the first and last discharge, None with no discharges."""
    dates = [ct.discharge_date for ct in care_targets if ct.discharge_date is not None]
    if not dates:
        return None
    return (max(dates) - min(dates)).days


def is_staggered(care_targets: Sequence[CareTarget]) -> bool:
    """At least two discharged targets, not all discharged on the same date."""
    discharged = [ct for ct in care_targets if ct.is_discharged]
    if len(discharged) < 2:
        return False
    return (resolution_span_days(discharged) or 0) > 0


def compute_complexity(working_set: WorkingSet) -> ComplexityMetrics:
    """Per-episode complaint counts.

    Complexity describes caseload, so override-flagged care targets are
    counted regardless of ``include_overrides``.
    """
    targets_by_episode: dict[str, list[CareTarget]] = defaultdict(list)
    for ct in working_set.selected.care_targets:
        targets_by_episode[ct.episode_id].append(ct)

    rows = []
    for episode in working_set.episodes:
        targets = targets_by_episode.get(episode.id, [])
        staggered = is_staggered(targets)
        rows.append(
            EpisodeComplexity(
                episode_id=episode.id,
                care_target_count=len(targets),
                discharged_count=sum(1 for ct in targets if ct.is_discharged),
                staggered_resolution=staggered,
                resolution_span_days=resolution_span_days(targets),
            )
        )

    total = len(rows)
    multi = sum(1 for r in rows if r.care_target_count > 1)
    staggered_rows = [r for r in rows if r.staggered_resolution]
    target_count = sum(r.care_target_count for r in rows)

    return ComplexityMetrics(
        total_episodes=total,
        multi_target_episode_count=multi,
        multi_target_percentage=percentage(multi, total),
        average_care_targets_per_episode=target_count / total if total else 0.0,
        staggered_resolution_count=len(staggered_rows),
        staggered_resolution_percentage=percentage(len(staggered_rows), total),
        median_resolution_span_days=median(
            [r.resolution_span_days for r in staggered_rows if r.resolution_span_days is not None]
        ),
        episodes=rows,
    )
