"""Diagnostics for operator visibility into analytics runs."""

from outcome_registry.observability.events import DiagnosticEvent, EventType
from outcome_registry.observability.logger import DiagnosticsRecorder

__all__ = [
    "DiagnosticEvent",
    "DiagnosticsRecorder",
    "EventType",
]
