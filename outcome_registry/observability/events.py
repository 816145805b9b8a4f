"""Structured diagnostic events emitted while computing analytics."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Types of diagnostic events."""

    MALFORMED_RECORD = "malformed_record"
    UNKNOWN_INSTRUMENT = "unknown_instrument"
    AMBIGUOUS_SCORE = "ambiguous_score"
    RUN_COMPLETED = "run_completed"


class DiagnosticEvent(BaseModel):
    """An operator-visible note about the snapshot being analysed."""

    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: Optional[str] = None
    record_kind: Optional[str] = None
    record_id: Optional[str] = None
    message: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)
