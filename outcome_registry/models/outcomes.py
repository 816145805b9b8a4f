"""Derived outcome models produced by the classifiers."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from outcome_registry.models.records import CareTarget, Episode


class Classification(str, Enum):
    """Direction of change between baseline and discharge."""

    IMPROVED = "improved"
    WORSENED = "worsened"
    UNCHANGED = "unchanged"
    INCOMPLETE = "incomplete"


class IntegrityStatus(str, Enum):
    """Completeness of a care target's outcome data."""

    COMPLETE = "complete"
    OVERRIDE = "override"
    INCOMPLETE = "incomplete"


class AchievementLevel(str, Enum):
    """Banded MCID achievement."""

    EXCELLENT = "excellent"
    SIGNIFICANT = "significant"
    MODERATE = "moderate"
    MINIMAL = "minimal"
    DECLINED = "declined"
    NONE = "none"


class ClassifiedOutcome(BaseModel):
    """Classification of one instrument on one care target."""

    model_config = ConfigDict(frozen=True)

    care_target_id: str
    instrument_code: str
    instrument_known: bool = True
    baseline_score: Optional[float] = None
    discharge_score: Optional[float] = None
    raw_delta: Optional[float] = Field(
        default=None,
        description="Sign-normalized change; positive always means improvement",
    )
    classification: Classification = Classification.INCOMPLETE
    mcid_threshold: Optional[float] = None
    mcid_achieved: Optional[bool] = None
    achievement_percentage: Optional[float] = None

    @property
    def has_baseline_and_discharge(self) -> bool:
        return self.baseline_score is not None and self.discharge_score is not None


class ClassifiedCareTarget(BaseModel):
    """A care target with its owning episode and per-instrument outcomes."""

    model_config = ConfigDict(frozen=True)

    care_target: CareTarget
    episode: Episode
    outcomes: dict[str, ClassifiedOutcome] = Field(
        default_factory=dict,
        description="Outcomes keyed by instrument code, never combined across instruments",
    )
    integrity_status: IntegrityStatus = IntegrityStatus.INCOMPLETE

    @property
    def has_scores(self) -> bool:
        return bool(self.outcomes)


class MCIDAchievement(BaseModel):
    """MCID achievement card for one (care target, instrument) pair."""

    care_target_id: str
    instrument_code: str
    tool_name: str
    mcid_threshold: float
    baseline_score: float
    discharge_score: float
    score_change: float
    percent_improvement: float
    achievement_percentage: float
    achieved_mcid: bool
    achievement_level: AchievementLevel
    interpretation: str


class MCIDSummary(BaseModel):
    """Roll-up of MCID achievements across assessments."""

    total_assessments: int = 0
    achieved_mcid: int = 0
    achievement_rate: float = 0.0
    success_level: str = "poor"
    overall_success: bool = False
    achievements: list[MCIDAchievement] = Field(default_factory=list)
