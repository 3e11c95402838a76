"""DTO types consumed and returned by the Analysis Engine.

DTOs are plain data containers used to transport run data and analysis results
between the Django layer and the UI. They intentionally avoid any Django/ORM
dependencies.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from .categories import TrackType


@dataclass(frozen=True, slots=True)
class RunRecord:
    """One logged Team Trials race attempt, as seen by the analysis engine.

    Attributes:
        score: Race score (non-negative); the outcome variable.
        final_place: Finishing position (1..18).
        rare_skills_count: Number of rare skills activated.
        normal_skills_count: Number of normal skills activated.
        track_type: Track surface/distance class (filter only).
        rushed: Whether the character became rushed during the race.
        good_positioning: Whether the character held good positioning.
        unique_skill_activated: Whether the unique skill triggered.
    """

    score: int
    final_place: int
    rare_skills_count: int
    normal_skills_count: int
    track_type: TrackType
    rushed: bool = False
    good_positioning: bool = False
    unique_skill_activated: bool = False

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "score": self.score,
            "finalPlace": self.final_place,
            "rareSkills": self.rare_skills_count,
            "normalSkills": self.normal_skills_count,
            "trackType": self.track_type.value,
            "rushed": self.rushed,
            "goodPositioning": self.good_positioning,
            "uniqueSkillActivated": self.unique_skill_activated,
        }


@dataclass(frozen=True, slots=True)
class QueryPoint:
    """Feature values for a hypothetical run, as chosen by the user.

    Attributes:
        rare_skills_count: Rare skills to simulate (UI range 0..10).
        normal_skills_count: Normal skills to simulate (UI range 0..20).
        final_place: Finishing position to simulate (UI range 1..18).
        rushed: Simulated rushed flag.
        good_positioning: Simulated good-positioning flag.
        unique_skill_activated: Simulated unique-skill flag.
    """

    rare_skills_count: int
    normal_skills_count: int
    final_place: int
    rushed: bool = False
    good_positioning: bool = False
    unique_skill_activated: bool = False


@dataclass(frozen=True, slots=True)
class Neighbor:
    """A historical run annotated with its distance to a query point.

    Attributes:
        record: The historical run.
        distance: Normalized Euclidean distance to the query.
        index: Position of the run in the input history (tie-break key).
    """

    record: RunRecord
    distance: float
    index: int

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        payload = self.record.as_json()
        payload["distance"] = self.distance
        return payload


@dataclass(frozen=True, slots=True)
class PredictionResult:
    """Result of a nearest-neighbor score prediction.

    Attributes:
        predicted_score: Inverse-distance weighted mean score, rounded.
        neighbors: The selected neighbors, ordered by ascending distance.
    """

    predicted_score: int
    neighbors: tuple[Neighbor, ...] = ()

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "predictedScore": self.predicted_score,
            "neighbors": [neighbor.as_json() for neighbor in self.neighbors],
        }


@dataclass(frozen=True, slots=True)
class DataPoint:
    """A single (x, y) sample used for scatter plots."""

    x: float
    y: float


@dataclass(frozen=True)
class RegressionResult:
    """Ordinary least-squares fit of score against one variable.

    Attributes:
        slope: Score change per unit of x.
        intercept: Fitted score at x = 0.
        correlation: Pearson correlation coefficient in [-1, 1].
        data_points: Input samples, in input order.
    """

    slope: float
    intercept: float
    correlation: float
    data_points: tuple[DataPoint, ...] = ()

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "correlation": self.correlation,
            "dataPoints": [{"x": point.x, "y": point.y} for point in self.data_points],
        }


@dataclass(frozen=True)
class ImpactAnalysis:
    """Score regressions against each skill/placement variable.

    Attributes:
        score_vs_rare_skills: Fit with x = rare skills activated.
        score_vs_normal_skills: Fit with x = normal skills activated.
        score_vs_final_place: Fit with x = finishing position.
    """

    score_vs_rare_skills: RegressionResult | None
    score_vs_normal_skills: RegressionResult | None
    score_vs_final_place: RegressionResult | None

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "scoreVsRareSkills": _json_or_none(self.score_vs_rare_skills),
            "scoreVsNormalSkills": _json_or_none(self.score_vs_normal_skills),
            "scoreVsFinalPlace": _json_or_none(self.score_vs_final_place),
        }


@dataclass(frozen=True)
class RunSummary:
    """Aggregate statistics over a set of runs.

    Attributes:
        total_runs: Number of runs summarized.
        average_score: Mean score, or None when there are no runs.
        average_final_place: Mean finishing position, or None.
        best_score: Highest score, or None.
        worst_score: Lowest score, or None.
        rushed_rate: Percentage (0..100) of runs where the character was rushed.
        unique_skill_rate: Percentage of runs with the unique skill activated.
        good_positioning_rate: Percentage of runs with good positioning.
        average_rare_skills: Mean rare skills activated, or None.
        average_normal_skills: Mean normal skills activated, or None.
    """

    total_runs: int
    average_score: float | None
    average_final_place: float | None
    best_score: int | None
    worst_score: int | None
    rushed_rate: float
    unique_skill_rate: float
    good_positioning_rate: float
    average_rare_skills: float | None
    average_normal_skills: float | None

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "totalRuns": self.total_runs,
            "averageScore": self.average_score,
            "averageFinalPlace": self.average_final_place,
            "bestScore": self.best_score,
            "worstScore": self.worst_score,
            "rushedRate": self.rushed_rate,
            "uniqueSkillRate": self.unique_skill_rate,
            "goodPositioningRate": self.good_positioning_rate,
            "averageRareSkills": self.average_rare_skills,
            "averageNormalSkills": self.average_normal_skills,
        }


@dataclass(frozen=True)
class TeamMemberStats:
    """One candidate's standing on a track, used to recommend a team.

    Attributes:
        member: Caller-supplied key identifying the candidate (e.g. a character id).
        track_type: Track the standing applies to.
        average_score: Mean score on `track_type`.
        total_runs: Runs logged on `track_type`.
        most_played_track: Track with the most runs across all of the
            candidate's runs.
    """

    member: Hashable
    track_type: TrackType
    average_score: float
    total_runs: int
    most_played_track: TrackType

    @property
    def is_most_played_track(self) -> bool:
        """Whether `track_type` is the candidate's most played track."""

        return self.track_type == self.most_played_track

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation (without the member key)."""

        return {
            "trackType": self.track_type.value,
            "averageScore": self.average_score,
            "totalRuns": self.total_runs,
            "mostPlayedTrack": self.most_played_track.value,
            "isMostPlayedTrack": self.is_most_played_track,
        }


@dataclass(frozen=True)
class TrackSummary:
    """Aggregate statistics for the runs on one track type."""

    track_type: TrackType
    total_runs: int
    average_score: float
    average_final_place: float
    rushed_rate: float
    best_score: int

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "trackType": self.track_type.value,
            "totalRuns": self.total_runs,
            "averageScore": self.average_score,
            "averageFinalPlace": self.average_final_place,
            "rushedRate": self.rushed_rate,
            "bestScore": self.best_score,
        }


def _json_or_none(result: RegressionResult | None) -> dict[str, object] | None:
    """Serialize an optional regression result."""

    return None if result is None else result.as_json()
