"""Health check endpoints."""

from fastapi import APIRouter, Depends

from outcome_registry import __version__
from outcome_registry.api.dependencies import catalog_dependency
from outcome_registry.instruments import InstrumentCatalog

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Basic health check."""
    return {
        "status": "healthy",
        "service": "outcome-registry",
        "version": __version__,
    }


@router.get("/health/ready")
async def readiness_check(catalog: InstrumentCatalog = Depends(catalog_dependency)) -> dict:
    """Readiness check - the instrument catalog must be loaded."""
    if len(catalog) == 0:
        return {
            "status": "not_ready",
            "errors": ["Instrument catalog empty"],
        }

    return {
        "status": "ready",
        "instruments": len(catalog),
    }


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness check - basic process health."""
    return {"status": "alive"}
