"""Instrument catalog endpoint."""

from fastapi import APIRouter, Depends

from outcome_registry.api.dependencies import catalog_dependency
from outcome_registry.instruments import Instrument, InstrumentCatalog

router = APIRouter()


@router.get("/instruments", response_model=list[Instrument])
async def list_instruments(
    catalog: InstrumentCatalog = Depends(catalog_dependency),
) -> list[Instrument]:
    """Instruments with their MCID thresholds and scoring direction."""
    return sorted(catalog, key=lambda i: i.code)
