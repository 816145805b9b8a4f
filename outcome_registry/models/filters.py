"""Dashboard filter values."""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TimeWindow(str, Enum):
    """Look-back windows offered on the leadership dashboard."""

    DAYS_30 = "30d"
    DAYS_90 = "90d"
    MONTHS_12 = "12mo"
    ALL = "all"

    @property
    def days(self) -> Optional[int]:
        """Length of the window in days, None for ``all``."""
        return _WINDOW_DAYS[self]

    def cutoff(self, as_of: datetime) -> Optional[date]:
        """Earliest episode start date retained relative to ``as_of``."""
        if self.days is None:
            return None
        return as_of.date() - timedelta(days=self.days)


_WINDOW_DAYS = {
    TimeWindow.DAYS_30: 30,
    TimeWindow.DAYS_90: 90,
    TimeWindow.MONTHS_12: 365,
    TimeWindow.ALL: None,
}


class Filters(BaseModel):
    """Filter set applied by the record selector."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    time_window: TimeWindow = TimeWindow.ALL
    domain: Optional[str] = None
    body_region: Optional[str] = None
    clinician_id: Optional[str] = None
    include_overrides: bool = Field(
        default=False,
        description="Keep override-flagged care targets in outcome-validity metrics",
    )
