"""Service-layer functions for the core app.

Services in `core` coordinate Django persistence concerns (ORM queries, player
scoping) with the pure analysis modules. Every function here reads only; runs
are converted into `RunRecord` values before any computation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from django.conf import settings
from django.db.models import QuerySet

from analysis.aggregations import TEAM_SIZE, rank_team_members, summarize_by_track, summarize_runs
from analysis.categories import TrackType
from analysis.dimensions import CORE_DIMENSIONS, EXTENDED_DIMENSIONS
from analysis.dto import (
    ImpactAnalysis,
    PredictionResult,
    QueryPoint,
    RunRecord,
    RunSummary,
    TeamMemberStats,
    TrackSummary,
)
from analysis.engine import build_run_records
from analysis.neighbors import DEFAULT_NEIGHBOR_COUNT, predict
from analysis.regression import impact_analysis
from gamedata.models import Run
from player_state.models import Character, Player

logger = logging.getLogger(__name__)

RECENT_RUNS_LIMIT = 10
BEST_RUNS_LIMIT = 5
RECENT_HISTORY_LIMIT = 20


@dataclass(frozen=True)
class CharacterSummary:
    """Run statistics for a single character.

    Attributes:
        character: The summarized character.
        summary: Aggregates over the character's runs.
    """

    character: Character
    summary: RunSummary

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        payload: dict[str, object] = {
            "characterId": self.character.pk,
            "characterName": self.character.character_name,
            "identifierVersion": self.character.identifier_version,
        }
        payload.update(self.summary.as_json())
        return payload


@dataclass(frozen=True)
class DashboardStats:
    """Player-wide statistics for the dashboard."""

    overview: RunSummary
    by_track: tuple[TrackSummary, ...]
    by_character: tuple[CharacterSummary, ...]
    recent_runs: tuple[Run, ...]
    best_runs: tuple[Run, ...]

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "overview": self.overview.as_json(),
            "byTrack": [row.as_json() for row in self.by_track],
            "byCharacter": [row.as_json() for row in self.by_character],
            "recentRuns": [run.as_json() for run in self.recent_runs],
            "bestRuns": [run.as_json() for run in self.best_runs],
        }


@dataclass(frozen=True)
class CharacterStats:
    """Detail statistics for one character, including impact analysis."""

    character: Character
    summary: RunSummary
    by_track: tuple[TrackSummary, ...]
    recent_history: tuple[Run, ...]
    impact: ImpactAnalysis
    training_data: tuple[RunRecord, ...]

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        payload: dict[str, object] = {"character": self.character.as_json()}
        payload.update(self.summary.as_json())
        payload["byTrack"] = [row.as_json() for row in self.by_track]
        payload["recentHistory"] = [
            {
                "date": run.date.isoformat(),
                "score": run.score,
                "finalPlace": run.final_place,
                "rareSkills": run.rare_skills_count,
                "normalSkills": run.normal_skills_count,
            }
            for run in self.recent_history
        ]
        payload["impactAnalysis"] = self.impact.as_json()
        payload["trainingData"] = [record.as_json() for record in self.training_data]
        return payload


@dataclass(frozen=True)
class TeamMember:
    """A character recommended for a track, with its standing there."""

    character: Character
    stats: TeamMemberStats

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        payload: dict[str, object] = {
            "id": self.character.pk,
            "characterName": self.character.character_name,
            "identifierVersion": self.character.identifier_version,
        }
        payload.update(self.stats.as_json())
        return payload


def default_neighbor_count() -> int:
    """Return the configured default neighbor count for the simulator."""

    return int(getattr(settings, "TEAM_TRIALS_NEIGHBOR_COUNT", DEFAULT_NEIGHBOR_COUNT))


def player_runs(
    player: Player,
    *,
    track_type: TrackType | None = None,
    character: Character | None = None,
    pending: bool = False,
) -> QuerySet[Run]:
    """Return the player's runs, optionally filtered.

    Args:
        player: Owning player.
        track_type: Optional track filter.
        character: Optional character filter (must belong to `player`).
        pending: Keep only runs still waiting for skill details (no skills
            counted and every flag unset).

    Returns:
        A queryset ordered by `(date, id)` so record order is stable across calls.
    """

    runs = Run.objects.filter(player=player).select_related("character")
    if track_type is not None:
        runs = runs.filter(track_type=track_type.value)
    if character is not None:
        runs = runs.filter(character=character)
    if pending:
        runs = runs.filter(
            rare_skills_count=0,
            normal_skills_count=0,
            unique_skill_activated=False,
            good_positioning=False,
            rushed=False,
        )
    return runs.order_by("date", "id")


def run_records_for(runs: Iterable[Run]) -> tuple[RunRecord, ...]:
    """Convert persisted runs into analysis records."""

    return build_run_records(runs)


def dashboard_stats(player: Player) -> DashboardStats:
    """Build player-wide dashboard statistics.

    Args:
        player: Owning player.

    Returns:
        DashboardStats with overview, per-track and per-character breakdowns,
        plus the most recent and best-scoring runs.
    """

    runs = list(player_runs(player))
    records = run_records_for(runs)

    by_character: list[CharacterSummary] = []
    for character in Character.objects.filter(player=player).order_by("character_name", "identifier_version", "id"):
        character_records = run_records_for(run for run in runs if run.character_id == character.pk)
        if not character_records:
            continue
        by_character.append(CharacterSummary(character=character, summary=summarize_runs(character_records)))

    recent = sorted(runs, key=lambda run: (run.date, run.pk), reverse=True)[:RECENT_RUNS_LIMIT]
    best = sorted(runs, key=lambda run: (-run.score, run.pk))[:BEST_RUNS_LIMIT]

    return DashboardStats(
        overview=summarize_runs(records),
        by_track=summarize_by_track(records),
        by_character=tuple(by_character),
        recent_runs=tuple(recent),
        best_runs=tuple(best),
    )


def character_stats(character: Character, *, track_type: TrackType | None = None) -> CharacterStats:
    """Build detail statistics for one character.

    Args:
        character: Character to summarize.
        track_type: Optional track filter applied to every section.

    Returns:
        CharacterStats including impact analysis and the training data used by
        the character-scoped simulator.
    """

    runs = list(player_runs(character.player, track_type=track_type, character=character))
    records = run_records_for(runs)
    return CharacterStats(
        character=character,
        summary=summarize_runs(records),
        by_track=summarize_by_track(records),
        recent_history=tuple(runs[-RECENT_HISTORY_LIMIT:]),
        impact=impact_analysis(records),
        training_data=records,
    )


def compare_characters(characters: Sequence[Character]) -> tuple[CharacterSummary, ...]:
    """Summarize several characters side by side.

    Args:
        characters: Characters to compare, in display order.

    Returns:
        One CharacterSummary per character, in the requested order. Characters
        without runs are included with an empty summary.
    """

    rows: list[CharacterSummary] = []
    for character in characters:
        records = run_records_for(player_runs(character.player, character=character))
        rows.append(CharacterSummary(character=character, summary=summarize_runs(records)))
    return tuple(rows)


def training_data(
    player: Player,
    *,
    track_type: TrackType | None = None,
    character: Character | None = None,
) -> tuple[RunRecord, ...]:
    """Return the flat run records used by the simulator and charts."""

    return run_records_for(player_runs(player, track_type=track_type, character=character))


def pending_runs(player: Player, *, track_type: TrackType | None = None) -> tuple[Run, ...]:
    """Return runs logged without skill details, oldest first."""

    return tuple(player_runs(player, track_type=track_type, pending=True))


def team_recommendations(player: Player, *, limit: int = TEAM_SIZE) -> dict[TrackType, tuple[TeamMember, ...]]:
    """Recommend the best characters for each track type.

    Args:
        player: Owning player.
        limit: Maximum characters per track.

    Returns:
        Every TrackType in declaration order, mapped to its recommended
        characters ranked by average score on that track. Tracks without runs
        map to an empty tuple.
    """

    runs = list(player_runs(player))
    roster = Character.objects.filter(player=player).order_by("character_name", "identifier_version", "id")
    characters = {character.pk: character for character in roster}
    records_by_character = {
        pk: run_records_for(run for run in runs if run.character_id == pk) for pk in characters
    }
    ranking = rank_team_members(records_by_character, limit=limit)
    return {
        track_type: tuple(TeamMember(character=characters[stats.member], stats=stats) for stats in members)
        for track_type, members in ranking.items()
    }


def impact_for(
    player: Player,
    *,
    track_type: TrackType | None = None,
    character: Character | None = None,
) -> ImpactAnalysis:
    """Run impact analysis over the player's (optionally filtered) runs."""

    return impact_analysis(training_data(player, track_type=track_type, character=character))


def simulate(
    player: Player,
    query: QueryPoint,
    *,
    track_type: TrackType | None = None,
    character: Character | None = None,
    k: int | None = None,
) -> PredictionResult | None:
    """Predict a score for a hypothetical run from the player's history.

    Args:
        player: Owning player.
        query: Hypothetical run features.
        track_type: Optional track filter applied to the history.
        character: When given, restrict the history to this character and use
            the skills/placement-only distance; otherwise use every feature.
        k: Neighbor count; defaults to `TEAM_TRIALS_NEIGHBOR_COUNT`.

    Returns:
        PredictionResult, or None when no runs match the filters.
    """

    history = training_data(player, track_type=track_type, character=character)
    dimensions = CORE_DIMENSIONS if character is not None else EXTENDED_DIMENSIONS
    result = predict(
        history,
        query,
        k=k if k is not None else default_neighbor_count(),
        dimensions=dimensions,
    )
    if result is None:
        logger.info("No runs available for simulation (player=%s, track=%s)", player.pk, track_type)
    return result
