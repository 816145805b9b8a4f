"""Pytest configuration and fixtures."""

from datetime import date, datetime, timezone

import pytest

from outcome_registry.analytics import RecordSet, load_records
from outcome_registry.instruments import DEFAULT_INSTRUMENTS, InstrumentCatalog
from outcome_registry.models.records import CareTarget, Episode, OutcomeScore

AS_OF = datetime(2026, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def as_of():
    """Pinned reference time used by every selector call in tests."""
    return AS_OF


@pytest.fixture
def catalog():
    """Built-in catalog plus instrument X (MCID 10, lower is better)."""
    return InstrumentCatalog.from_definitions(
        DEFAULT_INSTRUMENTS
        + [
            {
                "code": "X",
                "name": "Instrument X",
                "mcid_threshold": 10,
                "directionality": "lower_is_better",
            }
        ]
    )


@pytest.fixture
def make_episode():
    """Factory for episodes with sensible defaults."""

    def _make(id="ep-1", **overrides):
        data = {
            "id": id,
            "patient_name": "Test Patient",
            "type": "musculoskeletal",
            "status": "active",
            "start_date": date(2026, 5, 1),
            "clinic_id": "clinic-1",
            "clinician_id": "clin-1",
        }
        data.update(overrides)
        return Episode(**data)

    return _make


@pytest.fixture
def make_target():
    """Factory for care targets with sensible defaults."""

    def _make(id="ct-1", episode_id="ep-1", **overrides):
        data = {
            "id": id,
            "episode_id": episode_id,
            "name": "Low back pain",
            "domain": "spine",
            "body_region": "lumbar",
            "start_date": date(2026, 5, 1),
        }
        data.update(overrides)
        return CareTarget(**data)

    return _make


@pytest.fixture
def make_score():
    """Factory for outcome scores."""

    def _make(care_target_id="ct-1", instrument_code="ODI", score_type="baseline", score=50.0, recorded_at=None):
        return OutcomeScore(
            care_target_id=care_target_id,
            instrument_code=instrument_code,
            score_type=score_type,
            score=score,
            recorded_at=recorded_at or datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def sample_records(make_episode, make_target, make_score) -> RecordSet:
    """A small clinic snapshot.

    ep-1: two spine targets discharged 15 days apart (staggered), ODI scored.
    ep-2: one knee target, LEFS improved, discharged.
    ep-3: one neck target with an override, no discharge score.
    ep-4: one open shoulder target with no scores.
    """
    episodes = [
        make_episode("ep-1", start_date=date(2026, 5, 1), status="closed", close_date=date(2026, 5, 26)),
        make_episode("ep-2", start_date=date(2026, 5, 10), clinician_id="clin-2"),
        make_episode("ep-3", start_date=date(2026, 6, 1), type="neurologic"),
        make_episode("ep-4", start_date=date(2026, 6, 15)),
    ]
    targets = [
        make_target(
            "ct-1",
            "ep-1",
            start_date=date(2026, 5, 1),
            discharge_date=date(2026, 5, 11),
            discharge_reason="Goals met",
        ),
        make_target(
            "ct-2",
            "ep-1",
            name="Sciatica",
            start_date=date(2026, 5, 1),
            discharge_date=date(2026, 5, 26),
            discharge_reason="Goals met",
        ),
        make_target(
            "ct-3",
            "ep-2",
            name="Knee OA",
            domain="lower_extremity",
            body_region="knee",
            start_date=date(2026, 5, 10),
            discharge_date=date(2026, 6, 9),
            discharge_reason="Plateaued",
        ),
        make_target(
            "ct-4",
            "ep-3",
            name="Neck pain",
            domain="spine",
            body_region="cervical",
            start_date=date(2026, 6, 1),
            override=True,
            override_reason="Patient declined discharge survey",
        ),
        make_target(
            "ct-5",
            "ep-4",
            name="Shoulder impingement",
            domain="upper_extremity",
            body_region="shoulder",
            start_date=date(2026, 6, 15),
        ),
    ]
    scores = [
        make_score("ct-1", "ODI", "baseline", 50, datetime(2026, 5, 1, tzinfo=timezone.utc)),
        make_score("ct-1", "ODI", "discharge", 30, datetime(2026, 5, 11, tzinfo=timezone.utc)),
        make_score("ct-2", "ODI", "baseline", 40, datetime(2026, 5, 1, tzinfo=timezone.utc)),
        make_score("ct-2", "ODI", "discharge", 44, datetime(2026, 5, 26, tzinfo=timezone.utc)),
        make_score("ct-3", "LEFS", "baseline", 30, datetime(2026, 5, 10, tzinfo=timezone.utc)),
        make_score("ct-3", "LEFS", "discharge", 45, datetime(2026, 6, 9, tzinfo=timezone.utc)),
        make_score("ct-4", "NDI", "baseline", 30, datetime(2026, 6, 1, tzinfo=timezone.utc)),
    ]
    return load_records(episodes, targets, scores)


@pytest.fixture
def sample_snapshot() -> dict:
    """The same kind of snapshot as raw JSON rows, as the API and CLI receive it."""
    return {
        "episodes": [
            {"id": "ep-1", "patientName": "A", "type": "MSK", "status": "CLOSED",
             "startDate": "2026-05-01", "closeDate": "2026-05-26", "clinicId": "c1", "clinicianId": "clin-1"},
            {"id": "ep-2", "patientName": "B", "type": "musculoskeletal", "status": "active",
             "startDate": "2026-05-10", "clinicId": "c1", "clinicianId": "clin-2"},
        ],
        "careTargets": [
            {"id": "ct-1", "episodeId": "ep-1", "name": "LBP", "domain": "spine", "bodyRegion": "lumbar",
             "startDate": "2026-05-01", "dischargeDate": "2026-05-11", "dischargeReason": "Goals met"},
            {"id": "ct-2", "episodeId": "ep-1", "name": "Sciatica", "domain": "spine", "bodyRegion": "lumbar",
             "startDate": "2026-05-01", "dischargeDate": "2026-05-26", "dischargeReason": "Goals met"},
            {"id": "ct-3", "episodeId": "ep-2", "name": "Knee OA", "domain": "lower_extremity",
             "bodyRegion": "knee", "startDate": "2026-05-10"},
        ],
        "scores": [
            {"careTargetId": "ct-1", "instrumentCode": "ODI", "scoreType": "baseline", "score": 50,
             "recordedAt": "2026-05-01T09:00:00Z"},
            {"careTargetId": "ct-1", "instrumentCode": "ODI", "scoreType": "discharge", "score": 30,
             "recordedAt": "2026-05-11T09:00:00Z"},
            {"careTargetId": "ct-2", "instrumentCode": "ODI", "scoreType": "baseline", "score": 40,
             "recordedAt": "2026-05-01T09:00:00Z"},
            {"careTargetId": "ct-2", "instrumentCode": "ODI", "scoreType": "discharge", "score": 44,
             "recordedAt": "2026-05-26T09:00:00Z"},
            {"careTargetId": "ct-3", "instrumentCode": "LEFS", "scoreType": "baseline", "score": 30,
             "recordedAt": "2026-05-10T09:00:00Z"},
        ],
    }
