"""Small order statistics used by the aggregators."""

import math
from typing import Optional, Sequence


def median(values: Sequence[float]) -> Optional[float]:
    """Median, or None for an empty sequence."""
    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2


def percentile(values: Sequence[float], pct: float) -> Optional[float]:
    """Nearest-rank percentile, or None for an empty sequence."""
    if not values:
        return None
    ordered = sorted(values)
    index = max(0, math.ceil((pct / 100) * len(ordered)) - 1)
    return float(ordered[min(index, len(ordered) - 1)])


def percentage(part: int, whole: int) -> float:
    """``part`` as a percentage of ``whole``; 0.0 when ``whole`` is zero."""
    if whole <= 0:
        return 0.0
    return (part / whole) * 100
