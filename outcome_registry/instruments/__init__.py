"""Outcome-measure instrument catalog."""

from outcome_registry.instruments.catalog import (
    DEFAULT_INSTRUMENTS,
    Directionality,
    Instrument,
    InstrumentCatalog,
    default_catalog,
    get_catalog,
)

__all__ = [
    "DEFAULT_INSTRUMENTS",
    "Directionality",
    "Instrument",
    "InstrumentCatalog",
    "default_catalog",
    "get_catalog",
]
