"""Validation of raw source rows into an immutable record set.

Rows that fail validation are dropped here, before any aggregation sees them,
and reported through the diagnostics recorder. One bad row never prevents the
remaining rows from being analysed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from outcome_registry.exceptions import MalformedRecordError
from outcome_registry.models.records import CareTarget, Episode, OutcomeScore
from outcome_registry.observability import DiagnosticsRecorder, EventType

logger = logging.getLogger(__name__)

R = TypeVar("R", Episode, CareTarget, OutcomeScore)
RawRow = Union[Mapping[str, Any], BaseModel]


class RawSnapshot(BaseModel):
    """Unvalidated snapshot as delivered by the record source.

    Rows are left untyped so a single non-object row is rejected by
    ``load_records`` on its own instead of failing the whole snapshot.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    episodes: list[Any] = Field(default_factory=list)
    care_targets: list[Any] = Field(default_factory=list)
    scores: list[Any] = Field(default_factory=list)


@dataclass(frozen=True)
class RecordSet:
    """Validated, immutable snapshot of episodes, care targets and scores."""

    episodes: tuple[Episode, ...] = ()
    care_targets: tuple[CareTarget, ...] = ()
    scores: tuple[OutcomeScore, ...] = ()
    rejected: tuple[MalformedRecordError, ...] = field(default=(), compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.episodes


def _row_id(row: RawRow, *keys: str) -> Optional[str]:
    if isinstance(row, BaseModel):
        row = row.model_dump()
    if not isinstance(row, Mapping):
        return None
    for key in keys:
        value = row.get(key)
        if value:
            return str(value)
    return None


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    location = ".".join(str(part) for part in err.get("loc", ())) or "record"
    return f"{location}: {err.get('msg', 'invalid')}"


def _validate(model: type[R], kind: str, row: RawRow, id_keys: tuple[str, ...]) -> R:
    """Validate one row, raising MalformedRecordError on failure."""
    if isinstance(row, model):
        return row
    if isinstance(row, BaseModel):
        row = row.model_dump()
    if not isinstance(row, Mapping):
        raise MalformedRecordError(kind, f"expected a mapping, got {type(row).__name__}")
    try:
        return model.model_validate(row)
    except ValidationError as e:
        raise MalformedRecordError(kind, _first_error(e), _row_id(row, *id_keys)) from e


def load_records(
    episodes: Iterable[RawRow] = (),
    care_targets: Iterable[RawRow] = (),
    scores: Iterable[RawRow] = (),
    recorder: Optional[DiagnosticsRecorder] = None,
) -> RecordSet:
    """Validate raw rows, excluding malformed, duplicate and orphaned records.

    Args:
        episodes: Episode rows (mappings or ``Episode`` instances)
        care_targets: CareTarget rows
        scores: OutcomeScore rows
        recorder: Receives one ``malformed_record`` event per rejected row

    Returns:
        RecordSet holding only well-formed records plus the rejections.
    """
    rejected: list[MalformedRecordError] = []

    def reject(error: MalformedRecordError) -> None:
        rejected.append(error)
        if recorder is not None:
            recorder.record(
                EventType.MALFORMED_RECORD,
                str(error),
                record_kind=error.kind,
                record_id=error.record_id,
                reason=error.reason,
            )
        else:
            logger.warning(str(error))

    valid_episodes: dict[str, Episode] = {}
    for row in episodes:
        try:
            episode = _validate(Episode, "episode", row, ("id",))
            if episode.id in valid_episodes:
                raise MalformedRecordError("episode", "duplicate identifier", episode.id)
        except MalformedRecordError as e:
            reject(e)
            continue
        valid_episodes[episode.id] = episode

    valid_targets: dict[str, CareTarget] = {}
    for row in care_targets:
        try:
            target = _validate(CareTarget, "care_target", row, ("id",))
            if target.id in valid_targets:
                raise MalformedRecordError("care_target", "duplicate identifier", target.id)
            if target.episode_id not in valid_episodes:
                raise MalformedRecordError(
                    "care_target", f"unknown episode {target.episode_id}", target.id
                )
        except MalformedRecordError as e:
            reject(e)
            continue
        valid_targets[target.id] = target

    valid_scores: list[OutcomeScore] = []
    for row in scores:
        try:
            score = _validate(
                OutcomeScore, "outcome_score", row, ("care_target_id", "careTargetId")
            )
            if score.care_target_id not in valid_targets:
                raise MalformedRecordError(
                    "outcome_score", "unknown care target", score.care_target_id
                )
        except MalformedRecordError as e:
            reject(e)
            continue
        valid_scores.append(score)

    return RecordSet(
        episodes=tuple(valid_episodes.values()),
        care_targets=tuple(valid_targets.values()),
        scores=tuple(valid_scores),
        rejected=tuple(rejected),
    )


def load_snapshot(
    snapshot: RawSnapshot, recorder: Optional[DiagnosticsRecorder] = None
) -> RecordSet:
    """Validate a ``RawSnapshot``."""
    return load_records(
        snapshot.episodes, snapshot.care_targets, snapshot.scores, recorder=recorder
    )
