"""FastAPI dependencies shared by the analytics routes."""

from fastapi import Request

from outcome_registry.config import Settings, get_settings
from outcome_registry.instruments import InstrumentCatalog, get_catalog
from outcome_registry.observability import DiagnosticsRecorder


def catalog_dependency() -> InstrumentCatalog:
    """Process-wide instrument catalog."""
    return get_catalog()


def settings_dependency() -> Settings:
    return get_settings()


def recorder_dependency(request: Request) -> DiagnosticsRecorder:
    """A fresh diagnostics recorder per request, stamped with the request id."""
    return DiagnosticsRecorder(
        log_dir=get_settings().diagnostics_log_dir,
        request_id=getattr(request.state, "request_id", None),
    )
