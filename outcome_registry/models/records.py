"""Source records consumed by the analytics engine.

Rows arrive from the record source as plain mappings. Field names follow the
snake_case convention used throughout the package; the camelCase names used by
the dashboard client (``startDate``, ``episodeId``...) are accepted as aliases.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class EpisodeType(str, Enum):
    """Clinical pathway an episode belongs to."""

    MUSCULOSKELETAL = "musculoskeletal"
    NEUROLOGIC = "neurologic"


class EpisodeStatus(str, Enum):
    """Episode lifecycle statuses."""

    ACTIVE = "active"
    CLOSED = "closed"
    PENDING = "pending"


class ScoreType(str, Enum):
    """When an outcome instrument was administered."""

    BASELINE = "baseline"
    FOLLOW_UP = "follow_up"
    DISCHARGE = "discharge"


_EPISODE_TYPE_ALIASES = {
    "msk": EpisodeType.MUSCULOSKELETAL,
    "ortho": EpisodeType.MUSCULOSKELETAL,
    "neuro": EpisodeType.NEUROLOGIC,
    "neurological": EpisodeType.NEUROLOGIC,
}

_SCORE_TYPE_ALIASES = {
    "follow-up": ScoreType.FOLLOW_UP,
    "followup": ScoreType.FOLLOW_UP,
    "interim": ScoreType.FOLLOW_UP,
    "final": ScoreType.DISCHARGE,
    "initial": ScoreType.BASELINE,
}


def _normalize_token(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _calendar_date(value: Any) -> Any:
    """Reduce a timestamp (or timestamp string) to its UTC calendar date.

    Record sources backed by timestamp columns deliver values such as
    ``2026-05-01T14:30:00Z`` for fields that are dates here. Plain dates and
    anything unparseable pass through to normal validation.
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) <= 10:
            return text
        try:
            value = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return value
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(timezone.utc).date()
    return value


class SourceRecord(BaseModel):
    """Base for immutable source rows."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )


class Episode(SourceRecord):
    """One patient's care relationship with the clinic."""

    id: str = Field(min_length=1)
    patient_name: str = ""
    type: EpisodeType = EpisodeType.MUSCULOSKELETAL
    status: EpisodeStatus = EpisodeStatus.ACTIVE
    start_date: date
    close_date: Optional[date] = None
    clinic_id: Optional[str] = None
    clinician_id: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        value = _normalize_token(value)
        return _EPISODE_TYPE_ALIASES.get(value, value)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        return _normalize_token(value)

    @field_validator("start_date", "close_date", mode="before")
    @classmethod
    def _coerce_dates(cls, value: Any) -> Any:
        return _calendar_date(value)

    @model_validator(mode="after")
    def _check_dates(self) -> "Episode":
        if self.close_date is not None and self.close_date < self.start_date:
            raise ValueError("close_date precedes start_date")
        return self


class CareTarget(SourceRecord):
    """One discrete complaint tracked within an episode."""

    id: str = Field(min_length=1)
    episode_id: str = Field(min_length=1)
    name: str = ""
    domain: Optional[str] = None
    body_region: Optional[str] = None
    start_date: date
    discharge_date: Optional[date] = None
    discharge_reason: Optional[str] = None
    override: bool = False
    override_reason: Optional[str] = None

    @field_validator("override", mode="before")
    @classmethod
    def _coerce_override(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("start_date", "discharge_date", mode="before")
    @classmethod
    def _coerce_dates(cls, value: Any) -> Any:
        return _calendar_date(value)

    @model_validator(mode="after")
    def _check_dates(self) -> "CareTarget":
        if self.discharge_date is not None and self.discharge_date < self.start_date:
            raise ValueError("discharge_date precedes start_date")
        return self

    @property
    def is_discharged(self) -> bool:
        """A care target is discharged once it carries a discharge date."""
        return self.discharge_date is not None

    @property
    def duration_days(self) -> Optional[int]:
        """Days from start to discharge, None while still open."""
        if self.discharge_date is None:
            return None
        return (self.discharge_date - self.start_date).days


class OutcomeScore(SourceRecord):
    """One scored administration of an instrument against a care target."""

    care_target_id: str = Field(min_length=1)
    instrument_code: str = Field(min_length=1)
    score_type: ScoreType
    score: float
    recorded_at: datetime

    @field_validator("score_type", mode="before")
    @classmethod
    def _coerce_score_type(cls, value: Any) -> Any:
        value = _normalize_token(value)
        return _SCORE_TYPE_ALIASES.get(value, value)

    @field_validator("score")
    @classmethod
    def _check_finite(cls, value: float) -> float:
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError("score must be a finite number")
        return value

    @field_validator("recorded_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are read as UTC so aware and naive rows sort together
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
