"""Aggregation helpers for the Analysis Engine.

This module provides deterministic, reusable aggregation functions used by the
dashboard, character detail, and comparison views without introducing Django
dependencies.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Callable, Final, TypeVar

from .categories import TrackType
from .dto import RunRecord, RunSummary, TeamMemberStats, TrackSummary

K = TypeVar("K", bound=Hashable)

# Characters recommended per track in a Team Trials team.
TEAM_SIZE: Final[int] = 3


def filter_by_track(
    records: Iterable[RunRecord],
    track_type: TrackType | None,
) -> tuple[RunRecord, ...]:
    """Filter runs to a single track type.

    Args:
        records: Runs to filter.
        track_type: Track to keep, or None to keep every run.

    Returns:
        A tuple of matching runs in input order.
    """

    if track_type is None:
        return tuple(records)
    return tuple(record for record in records if record.track_type == track_type)


def average_metric(
    records: Iterable[RunRecord],
    *,
    value_getter: Callable[[RunRecord], float],
) -> float | None:
    """Compute an average across runs for a selected value.

    Args:
        records: Runs to average.
        value_getter: Callable that extracts a numeric value from a run.

    Returns:
        Arithmetic mean across extracted values, or None when no runs exist.
    """

    total = 0.0
    count = 0
    for record in records:
        total += value_getter(record)
        count += 1
    if count == 0:
        return None
    return total / count


def rate_percent(
    records: Sequence[RunRecord],
    *,
    flag_getter: Callable[[RunRecord], bool],
) -> float:
    """Return the percentage (0..100) of runs where a flag is set.

    Args:
        records: Runs to inspect.
        flag_getter: Callable returning the boolean flag for a run.

    Returns:
        Percentage of flagged runs, or 0.0 when there are no runs.
    """

    if not records:
        return 0.0
    flagged = sum(1 for record in records if flag_getter(record))
    return flagged * 100.0 / len(records)


def summarize_runs(records: Iterable[RunRecord]) -> RunSummary:
    """Summarize a set of runs into overview statistics.

    Args:
        records: Runs to summarize.

    Returns:
        RunSummary. Averages and best/worst scores are None when there are no
        runs; rates are 0.0.
    """

    runs = tuple(records)
    scores = [record.score for record in runs]
    return RunSummary(
        total_runs=len(runs),
        average_score=average_metric(runs, value_getter=lambda r: r.score),
        average_final_place=average_metric(runs, value_getter=lambda r: r.final_place),
        best_score=max(scores) if scores else None,
        worst_score=min(scores) if scores else None,
        rushed_rate=rate_percent(runs, flag_getter=lambda r: r.rushed),
        unique_skill_rate=rate_percent(runs, flag_getter=lambda r: r.unique_skill_activated),
        good_positioning_rate=rate_percent(runs, flag_getter=lambda r: r.good_positioning),
        average_rare_skills=average_metric(runs, value_getter=lambda r: r.rare_skills_count),
        average_normal_skills=average_metric(runs, value_getter=lambda r: r.normal_skills_count),
    )


def summarize_by_track(records: Iterable[RunRecord]) -> tuple[TrackSummary, ...]:
    """Summarize runs per track type.

    Args:
        records: Runs to summarize.

    Returns:
        One TrackSummary per track that has runs, in TrackType declaration
        order.
    """

    buckets: dict[TrackType, list[RunRecord]] = defaultdict(list)
    for record in records:
        buckets[record.track_type].append(record)

    summaries: list[TrackSummary] = []
    for track_type in TrackType:
        runs = buckets.get(track_type)
        if not runs:
            continue
        summaries.append(
            TrackSummary(
                track_type=track_type,
                total_runs=len(runs),
                average_score=sum(r.score for r in runs) / len(runs),
                average_final_place=sum(r.final_place for r in runs) / len(runs),
                rushed_rate=rate_percent(runs, flag_getter=lambda r: r.rushed),
                best_score=max(r.score for r in runs),
            )
        )
    return tuple(summaries)


def most_played_track(records: Iterable[RunRecord]) -> TrackType | None:
    """Return the track with the most runs.

    Args:
        records: Runs to count.

    Returns:
        The most frequent TrackType, with ties going to the track declared
        first, or None when there are no runs.
    """

    counts = Counter(record.track_type for record in records)
    best: TrackType | None = None
    for track_type in TrackType:
        if counts[track_type] and (best is None or counts[track_type] > counts[best]):
            best = track_type
    return best


def rank_team_members(
    records_by_member: Mapping[K, Sequence[RunRecord]],
    *,
    limit: int = TEAM_SIZE,
) -> dict[TrackType, tuple[TeamMemberStats, ...]]:
    """Recommend the strongest members for every track type.

    Members are ranked per track by average score on that track, then by run
    count. Remaining ties keep the mapping's iteration order.

    Args:
        records_by_member: Runs keyed by member (e.g. character id).
        limit: Maximum members recommended per track.

    Returns:
        A mapping with every TrackType in declaration order. Tracks without
        runs map to an empty tuple.

    Raises:
        ValueError: If `limit` is smaller than 1.
    """

    if limit < 1:
        raise ValueError("limit must be at least 1")

    favourites = {member: most_played_track(records) for member, records in records_by_member.items()}

    ranking: dict[TrackType, tuple[TeamMemberStats, ...]] = {}
    for track_type in TrackType:
        candidates: list[TeamMemberStats] = []
        for member, records in records_by_member.items():
            on_track = filter_by_track(records, track_type)
            if not on_track:
                continue
            candidates.append(
                TeamMemberStats(
                    member=member,
                    track_type=track_type,
                    average_score=sum(r.score for r in on_track) / len(on_track),
                    total_runs=len(on_track),
                    most_played_track=favourites[member],
                )
            )
        candidates.sort(key=lambda c: (-c.average_score, -c.total_runs))
        ranking[track_type] = tuple(candidates[:limit])
    return ranking
