"""Metrics objects returned by the aggregators.

Every object has a well-defined zero state so an empty working set renders as
zeros and empty maps instead of failing.
"""

from typing import Optional

from pydantic import BaseModel, Field

MCID_DISCLAIMER = (
    "MCID (Minimal Clinically Important Difference) is an interpretive reference only. "
    "Thresholds may vary by population and should not be treated as a universal clinical cutoff."
)


class VolumeMetrics(BaseModel):
    """Caseload counts; override-flagged care targets are always counted."""

    episodes_opened: int = 0
    episodes_closed: int = 0
    care_targets_created: int = 0
    care_targets_discharged: int = 0
    episodes_by_type: dict[str, int] = Field(default_factory=dict)
    care_targets_by_domain: dict[str, int] = Field(default_factory=dict)
    care_targets_by_body_region: dict[str, int] = Field(default_factory=dict)


class DomainDischargeRate(BaseModel):
    discharged: int = 0
    total: int = 0
    rate: float = 0.0


class ResolutionMetrics(BaseModel):
    """Discharge status facts. Discharged is a status, not an outcome judgment."""

    total_care_targets: int = 0
    total_discharged: int = 0
    discharged_percentage: float = 0.0
    discharge_rate_by_domain: dict[str, DomainDischargeRate] = Field(default_factory=dict)
    discharge_reason_distribution: dict[str, int] = Field(default_factory=dict)


class DomainDuration(BaseModel):
    median: Optional[float] = None
    count: int = 0


class TimeMetrics(BaseModel):
    """Days from care target start to discharge."""

    count: int = 0
    median_days_to_resolution: Optional[float] = None
    percentile_25: Optional[float] = None
    percentile_75: Optional[float] = None
    by_domain: dict[str, DomainDuration] = Field(default_factory=dict)


class InstrumentOutcomeSeries(BaseModel):
    """Outcome counts and median delta for a single instrument."""

    improved: int = 0
    worsened: int = 0
    unchanged: int = 0
    incomplete: int = 0
    mcid_achieved: int = 0
    median_delta: Optional[float] = None
    n: int = Field(default=0, description="Number of deltas behind median_delta")


class OutcomeMetrics(BaseModel):
    """Outcome improvement, reported as one series per instrument code."""

    total_with_outcomes: int = 0
    improved_count: int = 0
    improved_percentage: float = 0.0
    mcid_achieved_count: int = 0
    mcid_percentage: float = 0.0
    care_targets_without_scores: int = 0
    by_instrument: dict[str, InstrumentOutcomeSeries] = Field(default_factory=dict)
    mcid_disclaimer: str = MCID_DISCLAIMER


class EpisodeComplexity(BaseModel):
    episode_id: str
    care_target_count: int = 0
    discharged_count: int = 0
    staggered_resolution: bool = False
    resolution_span_days: Optional[int] = None


class ComplexityMetrics(BaseModel):
    """Multi-complaint caseload; override-flagged care targets are always counted."""

    total_episodes: int = 0
    multi_target_episode_count: int = 0
    multi_target_percentage: float = 0.0
    average_care_targets_per_episode: float = 0.0
    staggered_resolution_count: int = 0
    staggered_resolution_percentage: float = 0.0
    median_resolution_span_days: Optional[float] = None
    episodes: list[EpisodeComplexity] = Field(default_factory=list)


class IntegrityMetrics(BaseModel):
    """Baseline/discharge symmetry and override usage."""

    total_care_targets: int = 0
    complete_symmetry_count: int = 0
    complete_symmetry_percentage: float = 0.0
    override_count: int = 0
    override_percentage: float = 0.0
    incomplete_count: int = 0
    incomplete_percentage: float = 0.0
    care_targets_without_scores: int = 0
    missingness_by_instrument: dict[str, int] = Field(default_factory=dict)
    attempted_by_instrument: dict[str, int] = Field(default_factory=dict)
