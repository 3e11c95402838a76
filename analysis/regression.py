"""Single-variable linear regression for score impact analysis.

Fits `score = slope * x + intercept` by ordinary least squares and reports the
Pearson correlation, so the UI can show how much each rare skill, normal skill,
or finishing position is worth in points.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Callable

from .dto import DataPoint, ImpactAnalysis, RegressionResult, RunRecord

MIN_RUNS_FOR_REGRESSION = 2


def rare_skills_getter(record: RunRecord) -> float:
    """Return the rare-skill count as the independent variable."""

    return float(record.rare_skills_count)


def normal_skills_getter(record: RunRecord) -> float:
    """Return the normal-skill count as the independent variable."""

    return float(record.normal_skills_count)


def final_place_getter(record: RunRecord) -> float:
    """Return the finishing position as the independent variable."""

    return float(record.final_place)


def analyze(
    history: Sequence[RunRecord],
    x_getter: Callable[[RunRecord], float],
) -> RegressionResult | None:
    """Regress score against a selected variable.

    Args:
        history: Historical runs (not mutated).
        x_getter: Callable extracting the independent variable from a run.

    Returns:
        RegressionResult with slope, intercept, correlation, and the input
        samples in input order, or None when fewer than two runs exist.

    Notes:
        When every x value is identical the slope and correlation are 0 and the
        intercept is the mean score. When every score is identical the
        correlation is 0.
    """

    if len(history) < MIN_RUNS_FOR_REGRESSION:
        return None

    points = tuple(DataPoint(x=float(x_getter(record)), y=float(record.score)) for record in history)
    count = len(points)
    mean_x = sum(point.x for point in points) / count
    mean_y = sum(point.y for point in points) / count

    sum_xy = 0.0
    sum_xx = 0.0
    sum_yy = 0.0
    for point in points:
        dx = point.x - mean_x
        dy = point.y - mean_y
        sum_xy += dx * dy
        sum_xx += dx * dx
        sum_yy += dy * dy

    slope = 0.0 if sum_xx == 0 else sum_xy / sum_xx
    intercept = mean_y - slope * mean_x

    denominator = math.sqrt(sum_xx * sum_yy)
    correlation = 0.0 if denominator == 0 else sum_xy / denominator

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        correlation=correlation,
        data_points=points,
    )


def impact_analysis(history: Sequence[RunRecord]) -> ImpactAnalysis:
    """Run the standard score regressions for a set of runs.

    Args:
        history: Historical runs.

    Returns:
        ImpactAnalysis with one regression per variable; each is None when the
        history is too small.
    """

    return ImpactAnalysis(
        score_vs_rare_skills=analyze(history, rare_skills_getter),
        score_vs_normal_skills=analyze(history, normal_skills_getter),
        score_vs_final_place=analyze(history, final_place_getter),
    )
