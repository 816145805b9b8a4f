"""Classified working set shared by the aggregators and the export projector."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from outcome_registry.analytics.classifier import classify_care_target
from outcome_registry.analytics.selector import SelectedRecords
from outcome_registry.instruments import InstrumentCatalog
from outcome_registry.models.outcomes import ClassifiedCareTarget
from outcome_registry.models.records import Episode
from outcome_registry.observability import DiagnosticsRecorder


@dataclass(frozen=True)
class WorkingSet:
    """Selected records with every care target classified once."""

    selected: SelectedRecords
    classified: Mapping[str, ClassifiedCareTarget]

    @property
    def episodes(self) -> tuple[Episode, ...]:
        return self.selected.episodes

    @property
    def all_targets(self) -> tuple[ClassifiedCareTarget, ...]:
        """Every retained care target, override-flagged ones included."""
        return tuple(self.classified[ct.id] for ct in self.selected.care_targets)

    @property
    def outcome_targets(self) -> tuple[ClassifiedCareTarget, ...]:
        """Care targets eligible for outcome-validity metrics."""
        return tuple(self.classified[ct.id] for ct in self.selected.outcome_care_targets)


def build_working_set(
    selected: SelectedRecords,
    catalog: InstrumentCatalog,
    recorder: Optional[DiagnosticsRecorder] = None,
) -> WorkingSet:
    """Classify every selected care target."""
    classified = {
        ct.id: classify_care_target(
            ct, selected.episode_for(ct), selected.scores_for(ct.id), catalog, recorder
        )
        for ct in selected.care_targets
    }
    return WorkingSet(selected=selected, classified=MappingProxyType(classified))
