"""Static catalog of outcome-measure instruments.

The catalog is read-only: it is built once per process and only ever looked
up. An unknown code is not an error here; ``lookup`` returns ``None`` and the
classifier degrades that instrument to ``incomplete``.
"""

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from outcome_registry.config import get_settings
from outcome_registry.exceptions import InstrumentCatalogError

logger = logging.getLogger(__name__)


class Directionality(str, Enum):
    """Which direction of score change represents improvement."""

    LOWER_IS_BETTER = "lower_is_better"
    HIGHER_IS_BETTER = "higher_is_better"


class Instrument(BaseModel):
    """Definition of a standardized outcome measure."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1)
    name: str
    mcid_threshold: float = Field(gt=0)
    directionality: Directionality = Directionality.LOWER_IS_BETTER
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    score_unit: str = "points"

    def normalized_change(self, baseline: float, discharge: float) -> float:
        """Change from baseline to discharge with positive meaning improvement."""
        if self.directionality == Directionality.HIGHER_IS_BETTER:
            return discharge - baseline
        return baseline - discharge


# Instruments in clinical use at the practice
DEFAULT_INSTRUMENTS: list[dict[str, Any]] = [
    {
        "code": "ODI",
        "name": "Oswestry Disability Index",
        "mcid_threshold": 10,
        "directionality": "lower_is_better",
        "min_score": 0,
        "max_score": 100,
        "score_unit": "% disability",
    },
    {
        "code": "NDI",
        "name": "Neck Disability Index",
        "mcid_threshold": 5,
        "directionality": "lower_is_better",
        "min_score": 0,
        "max_score": 100,
        "score_unit": "% disability",
    },
    {
        "code": "QUICKDASH",
        "name": "QuickDASH",
        "mcid_threshold": 8,
        "directionality": "lower_is_better",
        "min_score": 0,
        "max_score": 100,
    },
    {
        "code": "LEFS",
        "name": "Lower Extremity Functional Scale",
        "mcid_threshold": 9,
        "directionality": "higher_is_better",
        "min_score": 0,
        "max_score": 80,
    },
    {
        "code": "RPQ",
        "name": "Rivermead Post-Concussion Symptoms Questionnaire",
        "mcid_threshold": 12,
        "directionality": "lower_is_better",
        "min_score": 0,
        "max_score": 64,
    },
]

DEFAULT_ALIASES: dict[str, str] = {
    "QUICK_DASH": "QUICKDASH",
    "QDASH": "QUICKDASH",
}


def _key(code: str) -> str:
    return code.strip().upper()


class InstrumentCatalog:
    """Immutable lookup table of instruments keyed by code."""

    def __init__(
        self,
        instruments: Iterable[Instrument],
        aliases: Optional[dict[str, str]] = None,
    ):
        self._instruments: dict[str, Instrument] = {}
        for instrument in instruments:
            self._instruments[_key(instrument.code)] = instrument
        self._aliases = {_key(alias): _key(target) for alias, target in (aliases or {}).items()}

    @classmethod
    def from_definitions(
        cls,
        definitions: Iterable[dict[str, Any]],
        aliases: Optional[dict[str, str]] = None,
    ) -> "InstrumentCatalog":
        """Build a catalog from plain instrument definitions."""
        try:
            instruments = [Instrument.model_validate(d) for d in definitions]
        except ValidationError as e:
            raise InstrumentCatalogError(f"Invalid instrument definition: {e}") from e
        return cls(instruments, aliases)

    @classmethod
    def from_json_file(cls, path: Path) -> "InstrumentCatalog":
        """Load a catalog from a JSON list (or ``{"instruments": [...], "aliases": {...}}``)."""
        try:
            data = json.loads(Path(path).read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise InstrumentCatalogError(f"Cannot read instrument file {path}: {e}") from e

        if isinstance(data, dict):
            return cls.from_definitions(data.get("instruments", []), data.get("aliases"))
        return cls.from_definitions(data)

    def lookup(self, code: str) -> Optional[Instrument]:
        """Return the instrument for ``code``, or None when it is unknown."""
        if not code:
            return None
        key = _key(code)
        key = self._aliases.get(key, key)
        return self._instruments.get(key)

    def canonical_code(self, code: str) -> str:
        """Catalog code for ``code``; unknown codes are upper-cased as given."""
        instrument = self.lookup(code)
        if instrument is not None:
            return instrument.code
        return _key(code)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.lookup(code) is not None

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._instruments.values())

    def __len__(self) -> int:
        return len(self._instruments)


def default_catalog() -> InstrumentCatalog:
    """Catalog built from the built-in instrument table."""
    return InstrumentCatalog.from_definitions(DEFAULT_INSTRUMENTS, DEFAULT_ALIASES)


@lru_cache
def get_catalog() -> InstrumentCatalog:
    """Get the process-wide catalog, honouring ``instrument_catalog_path``."""
    settings = get_settings()
    if settings.has_catalog_file:
        logger.info(f"Loading instrument catalog from {settings.instrument_catalog_path}")
        return InstrumentCatalog.from_json_file(settings.instrument_catalog_path)
    return default_catalog()
