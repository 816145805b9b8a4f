"""Outcome classifier.

For each instrument scored on a care target, picks the baseline and discharge
administrations and classifies the change between them. Instruments are never
combined: the result is a mapping keyed by instrument code.

Score selection rules:

* baseline: the ``baseline``-tagged score with the earliest ``recorded_at``.
* discharge: the ``discharge``-tagged score with the latest ``recorded_at`` on
  or before the discharge date (or the latest overall when none qualifies or
  the target has no discharge date).
* fallback: with no ``discharge``-tagged score but a discharge date, the
  ``follow_up`` score with the latest ``recorded_at`` on or before the
  discharge date. Ties on ``recorded_at`` go to the row that appears last.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from outcome_registry.analytics.integrity import classify_integrity
from outcome_registry.instruments import Instrument, InstrumentCatalog
from outcome_registry.models.outcomes import (
    Classification,
    ClassifiedCareTarget,
    ClassifiedOutcome,
)
from outcome_registry.models.records import CareTarget, Episode, OutcomeScore, ScoreType
from outcome_registry.observability import DiagnosticsRecorder, EventType

logger = logging.getLogger(__name__)


def _on_or_before(score: OutcomeScore, cutoff: date) -> bool:
    return score.recorded_at.date() <= cutoff


def _latest(scores: Sequence[OutcomeScore]) -> Optional[OutcomeScore]:
    if not scores:
        return None
    # Index breaks recorded_at ties in favour of the later row
    return max(enumerate(scores), key=lambda pair: (pair[1].recorded_at, pair[0]))[1]


def select_baseline(scores: Sequence[OutcomeScore]) -> Optional[OutcomeScore]:
    """Earliest baseline-tagged score."""
    baselines = [s for s in scores if s.score_type == ScoreType.BASELINE]
    if not baselines:
        return None
    return min(enumerate(baselines), key=lambda pair: (pair[1].recorded_at, pair[0]))[1]


def select_discharge(
    scores: Sequence[OutcomeScore], discharge_date: Optional[date]
) -> Optional[OutcomeScore]:
    """Authoritative discharge score, applying the follow-up fallback."""
    tagged = [s for s in scores if s.score_type == ScoreType.DISCHARGE]
    if tagged:
        if discharge_date is not None:
            in_window = [s for s in tagged if _on_or_before(s, discharge_date)]
            if in_window:
                return _latest(in_window)
        return _latest(tagged)

    if discharge_date is None:
        return None

    follow_ups = [
        s
        for s in scores
        if s.score_type == ScoreType.FOLLOW_UP and _on_or_before(s, discharge_date)
    ]
    return _latest(follow_ups)


def classify_outcome(
    care_target_id: str,
    instrument_code: str,
    baseline: Optional[float],
    discharge: Optional[float],
    instrument: Optional[Instrument],
) -> ClassifiedOutcome:
    """Classify one instrument's change. Pure in (baseline, discharge, instrument)."""
    if instrument is None or baseline is None or discharge is None:
        return ClassifiedOutcome(
            care_target_id=care_target_id,
            instrument_code=instrument_code,
            instrument_known=instrument is not None,
            baseline_score=baseline,
            discharge_score=discharge,
            mcid_threshold=instrument.mcid_threshold if instrument else None,
            classification=Classification.INCOMPLETE,
        )

    delta = instrument.normalized_change(baseline, discharge)
    if delta > 0:
        classification = Classification.IMPROVED
    elif delta < 0:
        classification = Classification.WORSENED
    else:
        classification = Classification.UNCHANGED

    threshold = instrument.mcid_threshold
    mcid_achieved = delta > 0 and abs(delta) >= threshold
    achievement = (delta / threshold) * 100 if delta > 0 else None

    return ClassifiedOutcome(
        care_target_id=care_target_id,
        instrument_code=instrument_code,
        baseline_score=baseline,
        discharge_score=discharge,
        raw_delta=delta,
        classification=classification,
        mcid_threshold=threshold,
        mcid_achieved=mcid_achieved,
        achievement_percentage=achievement,
    )


def classify_care_target_outcomes(
    care_target: CareTarget,
    scores: Iterable[OutcomeScore],
    catalog: InstrumentCatalog,
    recorder: Optional[DiagnosticsRecorder] = None,
) -> dict[str, ClassifiedOutcome]:
    """Classify every instrument scored on ``care_target``, keyed by instrument code."""
    by_instrument: dict[str, list[OutcomeScore]] = defaultdict(list)
    for score in scores:
        by_instrument[catalog.canonical_code(score.instrument_code)].append(score)

    outcomes: dict[str, ClassifiedOutcome] = {}
    for code in sorted(by_instrument):
        instrument_scores = by_instrument[code]
        instrument = catalog.lookup(code)
        if instrument is None and recorder is not None:
            recorder.record(
                EventType.UNKNOWN_INSTRUMENT,
                f"Instrument {code} not in catalog; classified as incomplete",
                record_kind="care_target",
                record_id=care_target.id,
                instrument_code=code,
            )

        tagged_discharges = sum(1 for s in instrument_scores if s.score_type == ScoreType.DISCHARGE)
        if tagged_discharges > 1 and recorder is not None:
            recorder.record(
                EventType.AMBIGUOUS_SCORE,
                f"{tagged_discharges} discharge scores for {code}; using the latest on/before discharge",
                record_kind="care_target",
                record_id=care_target.id,
                instrument_code=code,
            )

        baseline = select_baseline(instrument_scores)
        discharge = select_discharge(instrument_scores, care_target.discharge_date)
        outcomes[code] = classify_outcome(
            care_target.id,
            code,
            baseline.score if baseline else None,
            discharge.score if discharge else None,
            instrument,
        )

    return outcomes


def classify_care_target(
    care_target: CareTarget,
    episode: Episode,
    scores: Iterable[OutcomeScore],
    catalog: InstrumentCatalog,
    recorder: Optional[DiagnosticsRecorder] = None,
) -> ClassifiedCareTarget:
    """Run the outcome and integrity classifiers for one care target."""
    outcomes = classify_care_target_outcomes(care_target, scores, catalog, recorder)
    return ClassifiedCareTarget(
        care_target=care_target,
        episode=episode,
        outcomes=outcomes,
        integrity_status=classify_integrity(care_target, outcomes.values()),
    )
