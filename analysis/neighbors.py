"""Weighted k-nearest-neighbor score prediction.

Given a player's historical runs and a hypothetical run (the query), the
predictor ranks runs by normalized distance and returns an inverse-distance
weighted mean score of the closest `k` runs.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from .dimensions import CORE_DIMENSIONS, DimensionSet
from .dto import Neighbor, PredictionResult, QueryPoint, RunRecord

logger = logging.getLogger(__name__)

DEFAULT_NEIGHBOR_COUNT: Final[int] = 5
INVERSE_DISTANCE_EPSILON: Final[float] = 0.0001


def distance(record: RunRecord, query: QueryPoint, *, dimensions: DimensionSet = CORE_DIMENSIONS) -> float:
    """Return the Euclidean distance between a run and a query point.

    Args:
        record: Historical run.
        query: Query point.
        dimensions: Features participating in the metric.

    Returns:
        Square root of the summed squared per-dimension deltas.
    """

    return math.sqrt(sum(dimension.delta(record, query) ** 2 for dimension in dimensions))


def nearest_neighbors(
    history: Sequence[RunRecord],
    query: QueryPoint,
    *,
    k: int = DEFAULT_NEIGHBOR_COUNT,
    dimensions: DimensionSet = CORE_DIMENSIONS,
) -> tuple[Neighbor, ...]:
    """Return the `k` runs closest to the query, nearest first.

    Args:
        history: Historical runs (not mutated).
        query: Query point.
        k: Maximum number of neighbors (>= 1).
        dimensions: Features participating in the metric.

    Returns:
        Up to `min(k, len(history))` neighbors ordered by ascending distance.
        Equal distances keep their original history order.
    """

    if k < 1:
        raise ValueError("k must be >= 1")

    scored = [
        Neighbor(record=record, distance=distance(record, query, dimensions=dimensions), index=index)
        for index, record in enumerate(history)
    ]
    scored.sort(key=lambda neighbor: (neighbor.distance, neighbor.index))
    return tuple(scored[:k])


def predict(
    history: Sequence[RunRecord],
    query: QueryPoint,
    *,
    k: int = DEFAULT_NEIGHBOR_COUNT,
    dimensions: DimensionSet = CORE_DIMENSIONS,
    epsilon: float = INVERSE_DISTANCE_EPSILON,
) -> PredictionResult | None:
    """Predict a score for the query from its nearest historical runs.

    Args:
        history: Historical runs (not mutated).
        query: Query point. Values are used as-is; out-of-range inputs are not
            clamped.
        k: Maximum number of neighbors (>= 1).
        dimensions: Features participating in the metric.
        epsilon: Offset added to distances before inversion so exact matches
            (distance 0) get a finite weight.

    Returns:
        PredictionResult with the weighted score and the neighbors used, or
        None when `history` is empty.
    """

    if not history:
        return None

    neighbors = nearest_neighbors(history, query, k=k, dimensions=dimensions)

    total_weight = 0.0
    weighted_score = 0.0
    for neighbor in neighbors:
        weight = 1.0 / (neighbor.distance + epsilon)
        weighted_score += weight * neighbor.record.score
        total_weight += weight

    predicted = round_half_away_from_zero(weighted_score / total_weight)
    logger.debug("Predicted score %s from %s of %s runs", predicted, len(neighbors), len(history))
    return PredictionResult(predicted_score=predicted, neighbors=neighbors)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, with .5 rounded away from zero."""

    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))
