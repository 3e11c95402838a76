"""Boundary entry points for the Analysis Engine.

The Analysis Engine is a pure, non-Django module that accepts in-memory inputs
and returns DTOs. This module converts duck-typed run objects (ORM rows, test
doubles) into validated `RunRecord` values before any computation runs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol, TypeGuard

from .categories import TrackType, coerce_track_type
from .dto import RunRecord

logger = logging.getLogger(__name__)

_FEATURE_FIELDS = ("score", "final_place", "rare_skills_count", "normal_skills_count", "track_type")


class _RunLike(Protocol):
    """Protocol for persisted run inputs (duck-typed)."""

    score: int | None
    final_place: int | None
    rare_skills_count: int | None
    normal_skills_count: int | None
    track_type: str | TrackType | None


def build_run_records(objects: Iterable[object]) -> tuple[RunRecord, ...]:
    """Convert run-like objects into RunRecord values.

    Args:
        objects: An iterable of `Run`-like objects exposing score, placement,
            skill counts, track type, and the optional boolean flags.

    Returns:
        A tuple of RunRecord in input order.

    Notes:
        Objects missing a required field, or carrying a value of the wrong
        type, are skipped. Missing boolean flags default to False.
    """

    records: list[RunRecord] = []
    skipped = 0
    for obj in objects:
        record = _coerce_run_record(obj)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug("Skipped %s run objects without well-typed feature fields", skipped)
    return tuple(records)


def _coerce_run_record(obj: object) -> RunRecord | None:
    """Build a RunRecord from a single run-like object when well-typed."""

    if isinstance(obj, RunRecord):
        return obj
    if not _looks_like_run(obj):
        return None

    score = _coerce_int(obj.score)
    final_place = _coerce_int(obj.final_place)
    rare_skills = _coerce_int(obj.rare_skills_count)
    normal_skills = _coerce_int(obj.normal_skills_count)
    track_type = coerce_track_type(obj.track_type)
    if score is None or final_place is None or rare_skills is None or normal_skills is None:
        return None
    if track_type is None:
        return None

    return RunRecord(
        score=score,
        final_place=final_place,
        rare_skills_count=rare_skills,
        normal_skills_count=normal_skills,
        track_type=track_type,
        rushed=_coerce_bool(getattr(obj, "rushed", False)),
        good_positioning=_coerce_bool(getattr(obj, "good_positioning", False)),
        unique_skill_activated=_coerce_bool(getattr(obj, "unique_skill_activated", False)),
    )


def _looks_like_run(obj: object) -> TypeGuard[_RunLike]:
    """Return True if an object exposes the run feature interface."""

    return all(hasattr(obj, name) for name in _FEATURE_FIELDS)


def _coerce_int(value: object) -> int | None:
    """Coerce an object into an int when safe."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def _coerce_bool(value: object) -> bool:
    """Coerce an optional flag into a bool (missing/None is False)."""

    return value is True
