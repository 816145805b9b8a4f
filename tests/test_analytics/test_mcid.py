"""Tests for MCID achievement cards and summaries."""

import pytest

from outcome_registry.analytics import (
    analyze,
    calculate_mcid_achievement,
    classify_outcome,
    collect_mcid_achievements,
    summarize_mcid,
)
from outcome_registry.analytics.mcid import achievement_level
from outcome_registry.models.filters import Filters
from outcome_registry.models.outcomes import AchievementLevel


class TestAchievementLevel:
    @pytest.mark.parametrize(
        "change,pct,level",
        [
            (20, 200.0, AchievementLevel.EXCELLENT),
            (10, 100.0, AchievementLevel.SIGNIFICANT),
            (7, 70.0, AchievementLevel.MODERATE),
            (6, 60.0, AchievementLevel.MODERATE),
            (2, 20.0, AchievementLevel.MINIMAL),
            (0, 0.0, AchievementLevel.NONE),
            (-5, 0.0, AchievementLevel.DECLINED),
        ],
    )
    def test_default_bands(self, change, pct, level):
        assert achievement_level(change, pct) == level

    def test_custom_bands(self):
        bands = [(150.0, AchievementLevel.EXCELLENT), (0.0, AchievementLevel.MINIMAL)]
        assert achievement_level(10, 120.0, bands) == AchievementLevel.MINIMAL
        assert achievement_level(10, 150.0, bands) == AchievementLevel.EXCELLENT


class TestCalculateMCIDAchievement:
    """Tests for calculate_mcid_achievement."""

    def test_odi_improvement(self, catalog):
        odi = catalog.lookup("ODI")
        outcome = classify_outcome("ct-1", "ODI", 50, 30, odi)

        card = calculate_mcid_achievement(outcome, odi)

        assert card.tool_name == "Oswestry Disability Index"
        assert card.score_change == 20
        assert card.percent_improvement == pytest.approx(40.0)
        assert card.achievement_percentage == pytest.approx(200.0)
        assert card.achieved_mcid is True
        assert card.achievement_level == AchievementLevel.EXCELLENT
        assert "200%" in card.interpretation

    def test_decline(self, catalog):
        odi = catalog.lookup("ODI")
        card = calculate_mcid_achievement(classify_outcome("ct-1", "ODI", 40, 44, odi), odi)

        assert card.score_change == -4
        assert card.achieved_mcid is False
        assert card.achievement_percentage == 0.0
        assert card.achievement_level == AchievementLevel.DECLINED

    def test_zero_baseline_has_zero_percent_improvement(self, catalog):
        lefs = catalog.lookup("LEFS")
        card = calculate_mcid_achievement(classify_outcome("ct-1", "LEFS", 0, 20, lefs), lefs)
        assert card.percent_improvement == 0.0
        assert card.achieved_mcid is True

    def test_incomplete_outcome_has_no_card(self, catalog):
        odi = catalog.lookup("ODI")
        outcome = classify_outcome("ct-1", "ODI", 50, None, odi)
        assert calculate_mcid_achievement(outcome, odi) is None


class TestSummarizeMCID:
    def test_empty(self):
        summary = summarize_mcid([])
        assert summary.total_assessments == 0
        assert summary.achievement_rate == 0.0
        assert summary.success_level == "poor"
        assert summary.overall_success is False

    def test_sample_records(self, sample_records, catalog, as_of):
        working_set = analyze(sample_records, Filters(), as_of, catalog)
        achievements = collect_mcid_achievements(working_set.outcome_targets, catalog)

        summary = summarize_mcid(achievements)

        # ct-1 ODI and ct-3 LEFS reach MCID, ct-2 ODI worsens
        assert summary.total_assessments == 3
        assert summary.achieved_mcid == 2
        assert summary.achievement_rate == pytest.approx(200 / 3)
        assert summary.success_level == "good"
        assert summary.overall_success is True
        assert {(a.care_target_id, a.instrument_code) for a in summary.achievements} == {
            ("ct-1", "ODI"),
            ("ct-2", "ODI"),
            ("ct-3", "LEFS"),
        }

    def test_unknown_instruments_are_skipped(self, catalog, make_episode, make_target, make_score):
        from datetime import date, datetime, timezone

        from outcome_registry.analytics import classify_care_target

        target = make_target(discharge_date=date(2026, 5, 20))
        scores = [
            make_score(instrument_code="PSFS", score_type="baseline", score=3),
            make_score(
                instrument_code="PSFS",
                score_type="discharge",
                score=8,
                recorded_at=datetime(2026, 5, 20, tzinfo=timezone.utc),
            ),
        ]
        classified = classify_care_target(target, make_episode(), scores, catalog)
        assert collect_mcid_achievements([classified], catalog) == []
