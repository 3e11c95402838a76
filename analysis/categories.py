"""Shared track category definitions.

TrackType is the surface/distance class of a Team Trials race. It is used as a
filter over run records and never as a distance dimension.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class TrackType(StrEnum):
    """Track surface/distance class for a race.

    Values are stable identifiers shared by persisted runs, API payloads, and
    the analysis package.
    """

    TURF_SHORT = "TURF_SHORT"
    TURF_MILE = "TURF_MILE"
    TURF_MEDIUM = "TURF_MEDIUM"
    TURF_LONG = "TURF_LONG"
    DIRT = "DIRT"


TRACK_LABELS: Final[dict[TrackType, str]] = {
    TrackType.TURF_SHORT: "Turf Short",
    TrackType.TURF_MILE: "Turf Mile",
    TrackType.TURF_MEDIUM: "Turf Medium",
    TrackType.TURF_LONG: "Turf Long",
    TrackType.DIRT: "Dirt",
}

TRACK_CHOICES: Final[tuple[tuple[str, str], ...]] = tuple(
    (track.value, TRACK_LABELS[track]) for track in TrackType
)


def coerce_track_type(value: object) -> TrackType | None:
    """Coerce a raw value into a TrackType when it names a known track.

    Args:
        value: A TrackType, or a string such as "TURF_MILE".

    Returns:
        The matching TrackType, or None for unknown/blank values.
    """

    if isinstance(value, TrackType):
        return value
    if not isinstance(value, str):
        return None
    try:
        return TrackType(value.strip().upper())
    except ValueError:
        return None
