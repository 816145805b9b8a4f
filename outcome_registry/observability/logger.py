"""Per-run diagnostics recorder."""

import logging
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

from outcome_registry.observability.events import DiagnosticEvent, EventType

logger = logging.getLogger(__name__)


class DiagnosticsRecorder:
    """Collects diagnostic events for one analytics run.

    Events are kept in memory so they can be returned alongside the metrics,
    mirrored to the standard logger, and optionally appended to a JSON Lines
    file for later review.
    """

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        request_id: Optional[str] = None,
    ):
        """Initialize recorder.

        Args:
            log_dir: Directory for the ``diagnostics.jsonl`` sink (disabled when None)
            request_id: Correlation id stamped on every event
        """
        self.request_id = request_id or self.generate_request_id()
        self.events: list[DiagnosticEvent] = []

        self._log_file: Optional[Path] = None
        if log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            self._log_file = log_dir / "diagnostics.jsonl"

    @staticmethod
    def generate_request_id() -> str:
        """Generate a unique request ID."""
        return str(uuid.uuid4())[:8]

    def record(
        self,
        event_type: EventType,
        message: str,
        record_kind: Optional[str] = None,
        record_id: Optional[str] = None,
        **metadata: Any,
    ) -> DiagnosticEvent:
        """Record an event and mirror it to the logger."""
        event = DiagnosticEvent(
            event_type=event_type,
            request_id=self.request_id,
            record_kind=record_kind,
            record_id=record_id,
            message=message,
            metadata=metadata,
        )
        self.events.append(event)

        if event_type == EventType.RUN_COMPLETED:
            logger.info(f"[{self.request_id}] {message}")
        else:
            logger.warning(f"[{self.request_id}] {event_type.value}: {message}")

        self._write_event(event)
        return event

    def _write_event(self, event: DiagnosticEvent) -> None:
        """Append event to the JSONL sink."""
        if not self._log_file:
            return
        try:
            with open(self._log_file, "a") as f:
                f.write(event.model_dump_json() + "\n")
        except OSError as e:
            logger.warning(f"Failed to write diagnostic event: {e}")

    def count(self, event_type: EventType) -> int:
        """Number of recorded events of one type."""
        return sum(1 for e in self.events if e.event_type == event_type)

    @contextmanager
    def run(self, label: str):
        """Context manager timing an analytics run.

        Usage:
            with recorder.run("leadership"):
                analytics = compute_dashboard(...)
        """
        start_time = time.time()
        try:
            yield self
        finally:
            duration_ms = (time.time() - start_time) * 1000
            self.record(
                EventType.RUN_COMPLETED,
                f"{label} completed in {duration_ms:.1f}ms",
                duration_ms=duration_ms,
                malformed_records=self.count(EventType.MALFORMED_RECORD),
                unknown_instruments=self.count(EventType.UNKNOWN_INSTRUMENT),
            )
