"""Record, filter, outcome and metrics models."""

from outcome_registry.models.filters import Filters, TimeWindow
from outcome_registry.models.metrics import (
    MCID_DISCLAIMER,
    ComplexityMetrics,
    DomainDischargeRate,
    DomainDuration,
    EpisodeComplexity,
    InstrumentOutcomeSeries,
    IntegrityMetrics,
    OutcomeMetrics,
    ResolutionMetrics,
    TimeMetrics,
    VolumeMetrics,
)
from outcome_registry.models.outcomes import (
    AchievementLevel,
    Classification,
    ClassifiedCareTarget,
    ClassifiedOutcome,
    IntegrityStatus,
    MCIDAchievement,
    MCIDSummary,
)
from outcome_registry.models.records import (
    CareTarget,
    Episode,
    EpisodeStatus,
    EpisodeType,
    OutcomeScore,
    ScoreType,
)

__all__ = [
    "AchievementLevel",
    "CareTarget",
    "Classification",
    "ClassifiedCareTarget",
    "ClassifiedOutcome",
    "ComplexityMetrics",
    "DomainDischargeRate",
    "DomainDuration",
    "Episode",
    "EpisodeComplexity",
    "EpisodeStatus",
    "EpisodeType",
    "Filters",
    "InstrumentOutcomeSeries",
    "IntegrityMetrics",
    "IntegrityStatus",
    "MCIDAchievement",
    "MCIDSummary",
    "MCID_DISCLAIMER",
    "OutcomeMetrics",
    "OutcomeScore",
    "ResolutionMetrics",
    "ScoreType",
    "TimeMetrics",
    "TimeWindow",
    "VolumeMetrics",
]
