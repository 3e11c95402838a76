"""Feature dimensions used by the nearest-neighbor distance metric.

Each numeric dimension is scaled by a fixed domain constant so that features
with different natural ranges contribute comparably. The constants reflect the
in-game ranges of each feature and are not fitted to data.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from .dto import QueryPoint, RunRecord

RARE_SKILLS_SCALE: Final[float] = 10.0
NORMAL_SKILLS_SCALE: Final[float] = 20.0
FINAL_PLACE_SCALE: Final[float] = 18.0


class DimensionKind(Enum):
    """How a feature contributes to the distance metric."""

    numeric = "numeric"
    boolean = "boolean"


@dataclass(frozen=True, slots=True)
class FeatureDimension:
    """A single feature participating in the distance metric.

    Attributes:
        name: Attribute name shared by RunRecord and QueryPoint.
        kind: Numeric (scaled difference) or boolean (0/1 mismatch).
        scale: Divisor applied to numeric differences; ignored for booleans.
    """

    name: str
    kind: DimensionKind
    scale: float = 1.0

    def __post_init__(self) -> None:
        if self.kind is DimensionKind.numeric and self.scale <= 0:
            raise ValueError(f"scale must be > 0 for numeric dimension {self.name!r}")

    def delta(self, record: RunRecord, query: QueryPoint) -> float:
        """Return the per-dimension difference between a record and a query.

        Args:
            record: Historical run.
            query: Query point.

        Returns:
            `(record - query) / scale` for numeric dimensions, or 0.0/1.0 for
            boolean dimensions (equal/different).
        """

        record_value = getattr(record, self.name)
        query_value = getattr(query, self.name)
        if self.kind is DimensionKind.boolean:
            return 0.0 if bool(record_value) == bool(query_value) else 1.0
        return (float(record_value) - float(query_value)) / self.scale


DimensionSet = tuple[FeatureDimension, ...]

RARE_SKILLS: Final = FeatureDimension("rare_skills_count", DimensionKind.numeric, RARE_SKILLS_SCALE)
NORMAL_SKILLS: Final = FeatureDimension("normal_skills_count", DimensionKind.numeric, NORMAL_SKILLS_SCALE)
FINAL_PLACE: Final = FeatureDimension("final_place", DimensionKind.numeric, FINAL_PLACE_SCALE)
RUSHED: Final = FeatureDimension("rushed", DimensionKind.boolean)
GOOD_POSITIONING: Final = FeatureDimension("good_positioning", DimensionKind.boolean)
UNIQUE_SKILL: Final = FeatureDimension("unique_skill_activated", DimensionKind.boolean)

CORE_DIMENSIONS: Final[DimensionSet] = (RARE_SKILLS, NORMAL_SKILLS, FINAL_PLACE)
EXTENDED_DIMENSIONS: Final[DimensionSet] = CORE_DIMENSIONS + (RUSHED, GOOD_POSITIONING, UNIQUE_SKILL)
