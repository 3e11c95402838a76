"""JSON views for dashboard stats, comparisons, impact analysis, and the simulator.

Every view is scoped to the authenticated user's Player. Missing data is not
an error: prediction and regression payloads are `null` when there are not
enough runs to compute them.
"""

from __future__ import annotations

from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET

from analysis.dto import PredictionResult
from core.forms import ComparisonForm, PlayerCharacterFilterForm, SimulatorForm, TrackFilterForm
from core.services import (
    character_stats,
    compare_characters,
    dashboard_stats,
    impact_for,
    pending_runs,
    simulate,
    team_recommendations,
    training_data,
)
from player_state.models import Character, Player


def _request_player(request: HttpRequest) -> Player:
    """Return the Player associated with the authenticated user."""

    player, _ = Player.objects.get_or_create(
        user=request.user,
        defaults={"display_name": getattr(request.user, "username", "Player")},
    )
    return player


def _form_errors(form) -> JsonResponse:
    """Return a 400 response describing form validation errors."""

    return JsonResponse({"ok": False, "errors": form.errors.get_json_data()}, status=400)


def _prediction_payload(result: PredictionResult | None) -> dict[str, object] | None:
    """Serialize an optional prediction."""

    return None if result is None else result.as_json()


@require_GET
@login_required
def dashboard_stats_api(request: HttpRequest) -> JsonResponse:
    """Return player-wide overview, per-track, and per-character statistics."""

    player = _request_player(request)
    return JsonResponse(dashboard_stats(player).as_json())


@require_GET
@login_required
def character_stats_api(request: HttpRequest, pk: int) -> JsonResponse:
    """Return detail statistics and impact analysis for one character."""

    player = _request_player(request)
    character = get_object_or_404(Character, pk=pk, player=player)
    form = TrackFilterForm(request.GET)
    if not form.is_valid():
        return _form_errors(form)
    stats = character_stats(character, track_type=form.selected_track())
    return JsonResponse(stats.as_json())


@require_GET
@login_required
def compare_api(request: HttpRequest) -> JsonResponse:
    """Return side-by-side summaries for two or more characters."""

    player = _request_player(request)
    form = ComparisonForm(request.GET, player=player)
    if not form.is_valid():
        return _form_errors(form)
    rows = compare_characters(form.cleaned_data["character"])
    return JsonResponse({"characters": [row.as_json() for row in rows]})


@require_GET
@login_required
def training_data_api(request: HttpRequest) -> JsonResponse:
    """Return the flat run records used by the simulator."""

    player = _request_player(request)
    form = PlayerCharacterFilterForm(request.GET, player=player)
    if not form.is_valid():
        return _form_errors(form)
    records = training_data(
        player,
        track_type=form.selected_track(),
        character=form.cleaned_data.get("character"),
    )
    return JsonResponse({"runs": [record.as_json() for record in records]})


@require_GET
@login_required
def pending_runs_api(request: HttpRequest) -> JsonResponse:
    """Return runs still waiting for their skill details."""

    player = _request_player(request)
    form = TrackFilterForm(request.GET)
    if not form.is_valid():
        return _form_errors(form)
    runs = pending_runs(player, track_type=form.selected_track())
    return JsonResponse({"runs": [run.as_json() for run in runs]})


@require_GET
@login_required
def team_recommendations_api(request: HttpRequest) -> JsonResponse:
    """Return the recommended characters for every track type."""

    player = _request_player(request)
    recommendations = team_recommendations(player)
    return JsonResponse(
        {track_type.value: [member.as_json() for member in members] for track_type, members in recommendations.items()}
    )


@require_GET
@login_required
def impact_api(request: HttpRequest) -> JsonResponse:
    """Return score regressions against rare skills, normal skills, and place."""

    player = _request_player(request)
    form = PlayerCharacterFilterForm(request.GET, player=player)
    if not form.is_valid():
        return _form_errors(form)
    impact = impact_for(
        player,
        track_type=form.selected_track(),
        character=form.cleaned_data.get("character"),
    )
    return JsonResponse(impact.as_json())


@require_GET
@login_required
def simulator_api(request: HttpRequest) -> JsonResponse:
    """Predict a score from all of the player's runs using every feature."""

    player = _request_player(request)
    form = SimulatorForm(request.GET)
    if not form.is_valid():
        return _form_errors(form)
    result = simulate(
        player,
        form.query_point(),
        track_type=form.selected_track(),
        k=form.cleaned_data.get("k"),
    )
    return JsonResponse({"ok": True, "prediction": _prediction_payload(result)})


@require_GET
@login_required
def character_simulator_api(request: HttpRequest, pk: int) -> JsonResponse:
    """Predict a score from one character's runs using skills and placement."""

    player = _request_player(request)
    character = get_object_or_404(Character, pk=pk, player=player)
    form = SimulatorForm(request.GET)
    if not form.is_valid():
        return _form_errors(form)
    result = simulate(
        player,
        form.query_point(),
        track_type=form.selected_track(),
        character=character,
        k=form.cleaned_data.get("k"),
    )
    return JsonResponse({"ok": True, "prediction": _prediction_payload(result)})
