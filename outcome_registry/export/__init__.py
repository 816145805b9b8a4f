"""Registry export: flat CSV rows per care target and instrument."""

from outcome_registry.export.registry_csv import (
    REGISTRY_COLUMNS,
    RegistryExportFilters,
    RegistryRow,
    project_registry_rows,
    registry_filename,
    registry_to_csv,
)

__all__ = [
    "REGISTRY_COLUMNS",
    "RegistryExportFilters",
    "RegistryRow",
    "project_registry_rows",
    "registry_filename",
    "registry_to_csv",
]
