"""Exceptions raised inside the analytics engine."""

from typing import Optional


class RegistryError(Exception):
    """Base exception for outcome registry errors."""

    pass


class MalformedRecordError(RegistryError):
    """A source record is missing required data or breaks a record invariant.

    Raised while loading raw rows and absorbed by the loader: the offending
    record is dropped from every aggregation and reported as a diagnostic.
    """

    def __init__(self, kind: str, reason: str, record_id: Optional[str] = None):
        self.kind = kind
        self.reason = reason
        self.record_id = record_id
        label = f"{kind} {record_id}" if record_id else kind
        super().__init__(f"Malformed {label}: {reason}")


class InstrumentCatalogError(RegistryError):
    """An instrument definition file could not be loaded."""

    pass
