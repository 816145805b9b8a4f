"""Data integrity classifier and integrity colour bands."""

from typing import Iterable, Sequence

from outcome_registry.models.outcomes import ClassifiedOutcome, IntegrityStatus
from outcome_registry.models.records import CareTarget

# (lower_bound_percent, label), highest bound first
DEFAULT_INTEGRITY_BANDS: tuple[tuple[float, str], ...] = (
    (90.0, "good"),
    (70.0, "warning"),
    (0.0, "critical"),
)


def classify_integrity(
    care_target: CareTarget, outcomes: Iterable[ClassifiedOutcome]
) -> IntegrityStatus:
    """Completeness of a care target's outcome data.

    Override takes precedence over completeness for labelling but leaves the
    underlying classifications untouched. A target with no scored instrument
    is incomplete.
    """
    if care_target.override:
        return IntegrityStatus.OVERRIDE

    outcomes = list(outcomes)
    if outcomes and all(o.has_baseline_and_discharge for o in outcomes):
        return IntegrityStatus.COMPLETE
    return IntegrityStatus.INCOMPLETE


def integrity_band(
    percentage: float,
    bands: Sequence[tuple[float, str]] = DEFAULT_INTEGRITY_BANDS,
) -> str:
    """Label for a symmetry percentage from an ordered band table."""
    ordered = sorted(bands, key=lambda b: b[0], reverse=True)
    for lower_bound, label in ordered:
        if percentage >= lower_bound:
            return label
    return ordered[-1][1] if ordered else ""
