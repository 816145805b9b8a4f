"""MCID achievement cards.

Achievement levels come from an ordered band table of
``(lower_bound_percent, level)`` pairs so the bands can be tuned without
touching classification logic. The table applies only to improving changes;
a decline is always ``declined`` and no change is always ``none``.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from outcome_registry.instruments import Instrument, InstrumentCatalog
from outcome_registry.models.outcomes import (
    AchievementLevel,
    ClassifiedCareTarget,
    ClassifiedOutcome,
    MCIDAchievement,
    MCIDSummary,
)

DEFAULT_ACHIEVEMENT_BANDS: tuple[tuple[float, AchievementLevel], ...] = (
    (200.0, AchievementLevel.EXCELLENT),
    (100.0, AchievementLevel.SIGNIFICANT),
    (60.0, AchievementLevel.MODERATE),
    (0.0, AchievementLevel.MINIMAL),
)

DEFAULT_SUCCESS_BANDS: tuple[tuple[float, str], ...] = (
    (80.0, "excellent"),
    (60.0, "good"),
    (40.0, "fair"),
    (0.0, "poor"),
)

OVERALL_SUCCESS_RATE = 50.0


def achievement_level(
    score_change: float,
    achievement_percentage: float,
    bands: Sequence[tuple[float, AchievementLevel]] = DEFAULT_ACHIEVEMENT_BANDS,
) -> AchievementLevel:
    """Band an achievement percentage."""
    if score_change < 0:
        return AchievementLevel.DECLINED
    if score_change == 0:
        return AchievementLevel.NONE
    for lower_bound, level in sorted(bands, key=lambda b: b[0], reverse=True):
        if achievement_percentage >= lower_bound:
            return AchievementLevel(level)
    return AchievementLevel.MINIMAL


def _interpretation(level: AchievementLevel, achievement_percentage: float) -> str:
    pct = round(achievement_percentage)
    if level == AchievementLevel.DECLINED:
        return "Patient condition declined from baseline"
    if level == AchievementLevel.NONE:
        return "No measurable improvement detected"
    if level == AchievementLevel.EXCELLENT:
        return f"Outstanding improvement - achieved {pct}% of MCID threshold"
    if level == AchievementLevel.SIGNIFICANT:
        return f"Clinically significant improvement achieved - {pct}% of MCID threshold"
    if level == AchievementLevel.MODERATE:
        return f"Approaching clinical significance - {pct}% of MCID threshold"
    return f"Some improvement detected - {pct}% of MCID threshold"


def calculate_mcid_achievement(
    outcome: ClassifiedOutcome,
    instrument: Instrument,
    bands: Sequence[tuple[float, AchievementLevel]] = DEFAULT_ACHIEVEMENT_BANDS,
) -> Optional[MCIDAchievement]:
    """Build the achievement card for one classified outcome.

    Returns None when the outcome lacks a baseline or discharge score.
    """
    if outcome.raw_delta is None or not outcome.has_baseline_and_discharge:
        return None

    baseline = outcome.baseline_score
    score_change = outcome.raw_delta
    achievement_pct = outcome.achievement_percentage or 0.0
    level = achievement_level(score_change, achievement_pct, bands)

    return MCIDAchievement(
        care_target_id=outcome.care_target_id,
        instrument_code=outcome.instrument_code,
        tool_name=instrument.name,
        mcid_threshold=instrument.mcid_threshold,
        baseline_score=baseline,
        discharge_score=outcome.discharge_score,
        score_change=score_change,
        percent_improvement=(score_change / baseline) * 100 if baseline else 0.0,
        achievement_percentage=achievement_pct,
        achieved_mcid=bool(outcome.mcid_achieved),
        achievement_level=level,
        interpretation=_interpretation(level, achievement_pct),
    )


def collect_mcid_achievements(
    classified: Iterable[ClassifiedCareTarget],
    catalog: InstrumentCatalog,
    bands: Sequence[tuple[float, AchievementLevel]] = DEFAULT_ACHIEVEMENT_BANDS,
) -> list[MCIDAchievement]:
    """One achievement card per (care target, instrument) with complete data."""
    achievements = []
    for target in classified:
        for code, outcome in target.outcomes.items():
            instrument = catalog.lookup(code)
            if instrument is None:
                continue
            achievement = calculate_mcid_achievement(outcome, instrument, bands)
            if achievement is not None:
                achievements.append(achievement)
    return achievements


def summarize_mcid(
    achievements: Sequence[MCIDAchievement],
    bands: Sequence[tuple[float, str]] = DEFAULT_SUCCESS_BANDS,
) -> MCIDSummary:
    """Share of assessments reaching MCID, with a banded success level.

    Counts assessments only; scores from different instruments are never
    averaged together.
    """
    total = len(achievements)
    achieved = sum(1 for a in achievements if a.achieved_mcid)
    rate = (achieved / total) * 100 if total > 0 else 0.0

    success_level = "poor"
    for lower_bound, label in sorted(bands, key=lambda b: b[0], reverse=True):
        if rate >= lower_bound:
            success_level = label
            break

    return MCIDSummary(
        total_assessments=total,
        achieved_mcid=achieved,
        achievement_rate=rate,
        success_level=success_level,
        overall_success=total > 0 and rate >= OVERALL_SUCCESS_RATE,
        achievements=list(achievements),
    )
