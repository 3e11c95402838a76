"""Django integration tests for the score simulator endpoints."""

from __future__ import annotations

from datetime import date

import pytest
from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse

from gamedata.models import Run
from player_state.models import Character

pytestmark = pytest.mark.integration

QUERY = {"rare_skills": 5, "normal_skills": 10, "final_place": 1}


def _log_run(character: Character, **fields) -> Run:
    values = {
        "track_type": "TURF_MILE",
        "final_place": 1,
        "rare_skills_count": 0,
        "normal_skills_count": 0,
        "score": 100,
        "date": date(2025, 6, 1),
    }
    values.update(fields)
    return Run.objects.create(player=character.player, character=character, **values)


@pytest.mark.django_db
def test_simulator_returns_null_prediction_without_runs(auth_client) -> None:
    """No history is a normal outcome, not an error."""

    response = auth_client.get(reverse("core:simulator"), QUERY)

    assert response.status_code == 200
    assert response.json() == {"ok": True, "prediction": None}


@pytest.mark.django_db
def test_simulator_prefers_exact_match(auth_client, character) -> None:
    """An exact feature match ranks first and dominates the prediction."""

    _log_run(character, score=100)
    exact = _log_run(character, rare_skills_count=5, normal_skills_count=10, score=200)

    response = auth_client.get(reverse("core:simulator"), {**QUERY, "k": 2})

    prediction = response.json()["prediction"]
    assert prediction["predictedScore"] == 200
    assert prediction["neighbors"][0]["distance"] == 0.0
    assert prediction["neighbors"][0]["score"] == exact.score
    assert len(prediction["neighbors"]) == 2


@pytest.mark.django_db
def test_global_simulator_uses_flag_dimensions(auth_client, character) -> None:
    """The global simulator counts rushed/positioning/unique-skill mismatches."""

    _log_run(character, rare_skills_count=5, normal_skills_count=10, rushed=True, score=100)
    _log_run(character, rare_skills_count=4, normal_skills_count=10, rushed=False, score=300)

    global_prediction = auth_client.get(reverse("core:simulator"), {**QUERY, "k": 1}).json()["prediction"]
    character_prediction = auth_client.get(
        reverse("core:character_simulator", args=[character.pk]),
        {**QUERY, "k": 1},
    ).json()["prediction"]

    assert global_prediction["predictedScore"] == 300
    assert character_prediction["predictedScore"] == 100


@pytest.mark.django_db
def test_character_simulator_uses_only_that_character(auth_client, character) -> None:
    """Character-scoped predictions ignore other characters' runs."""

    other = Character.objects.create(player=character.player, character_name="Gold Ship")
    _log_run(other, rare_skills_count=5, normal_skills_count=10, score=999)
    _log_run(character, score=150)

    prediction = auth_client.get(
        reverse("core:character_simulator", args=[character.pk]),
        QUERY,
    ).json()["prediction"]

    assert prediction["predictedScore"] == 150
    assert len(prediction["neighbors"]) == 1


@pytest.mark.django_db
def test_simulator_track_filter(auth_client, character) -> None:
    """Only runs on the selected track feed the prediction."""

    _log_run(character, track_type="DIRT", score=700)
    _log_run(character, track_type="TURF_SHORT", rare_skills_count=5, normal_skills_count=10, score=900)

    prediction = auth_client.get(
        reverse("core:simulator"),
        {**QUERY, "track_type": "DIRT"},
    ).json()["prediction"]

    assert prediction["predictedScore"] == 700


@pytest.mark.django_db
@override_settings(TEAM_TRIALS_NEIGHBOR_COUNT=1)
def test_simulator_default_k_comes_from_settings(auth_client, character) -> None:
    """Without `k`, the configured neighbor count is used."""

    for score in (100, 200, 300):
        _log_run(character, score=score)

    prediction = auth_client.get(reverse("core:simulator"), QUERY).json()["prediction"]

    assert len(prediction["neighbors"]) == 1


@pytest.mark.django_db
def test_simulator_rejects_values_outside_slider_ranges(auth_client) -> None:
    """The form enforces UI ranges before the predictor runs."""

    response = auth_client.get(reverse("core:simulator"), {**QUERY, "final_place": 19, "rare_skills": -1})

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "final_place" in errors
    assert "rare_skills" in errors


@pytest.mark.django_db
def test_character_simulator_is_player_scoped(auth_client) -> None:
    """Other players' characters return 404."""

    stranger = get_user_model().objects.create_user(username="bob", password="password")
    foreign = Character.objects.create(player=stranger.player, character_name="Rice Shower")

    response = auth_client.get(reverse("core:character_simulator", args=[foreign.pk]), QUERY)
    assert response.status_code == 404


@pytest.mark.django_db
def test_simulator_rejects_post(auth_client) -> None:
    """Simulator endpoints are read-only."""

    response = auth_client.post(reverse("core:simulator"), QUERY)
    assert response.status_code == 405
