"""Django integration tests for the stats JSON endpoints."""

from __future__ import annotations

from datetime import date

import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.urls import reverse
from pytest import approx

from gamedata.models import Run
from player_state.models import Character

pytestmark = pytest.mark.integration


def _log_run(character: Character, *, track: str = "TURF_MILE", **fields) -> Run:
    values = {
        "final_place": 1,
        "rare_skills_count": 1,
        "normal_skills_count": 4,
        "score": 10000,
        "date": date(2025, 6, 1),
    }
    values.update(fields)
    return Run.objects.create(player=character.player, character=character, track_type=track, **values)


@pytest.mark.django_db
def test_stats_endpoints_require_login(client) -> None:
    """Anonymous requests are redirected to the login page."""

    response = client.get(reverse("core:dashboard_stats"))
    assert response.status_code == 302
    assert "/admin/login/" in response["Location"]


@pytest.mark.django_db
def test_dashboard_stats_with_no_runs(auth_client) -> None:
    """An empty dashboard reports zero runs and null averages."""

    response = auth_client.get(reverse("core:dashboard_stats"))

    assert response.status_code == 200
    payload = response.json()
    assert payload["overview"]["totalRuns"] == 0
    assert payload["overview"]["averageScore"] is None
    assert payload["byTrack"] == []
    assert payload["byCharacter"] == []
    assert payload["recentRuns"] == []


@pytest.mark.django_db
def test_dashboard_stats_summarizes_runs(auth_client, character) -> None:
    """Overview, per-track, per-character, recent, and best runs are reported."""

    other = Character.objects.create(player=character.player, character_name="Gold Ship")
    _log_run(character, score=10000, final_place=3, rushed=True, date=date(2025, 6, 1))
    _log_run(character, track="DIRT", score=14000, final_place=1, date=date(2025, 6, 3))
    _log_run(other, score=18000, final_place=2, date=date(2025, 6, 2))

    payload = auth_client.get(reverse("core:dashboard_stats")).json()

    assert payload["overview"]["totalRuns"] == 3
    assert payload["overview"]["averageScore"] == approx(14000.0)
    assert payload["overview"]["rushedRate"] == approx(100.0 / 3)
    assert [row["trackType"] for row in payload["byTrack"]] == ["TURF_MILE", "DIRT"]
    assert [row["characterName"] for row in payload["byCharacter"]] == ["Gold Ship", "Special Week"]
    assert payload["byCharacter"][1]["totalRuns"] == 2
    assert [run["score"] for run in payload["recentRuns"]] == [14000, 18000, 10000]
    assert payload["bestRuns"][0]["score"] == 18000


@pytest.mark.django_db
def test_character_stats_include_impact_analysis(auth_client, character) -> None:
    """Character detail exposes regressions and training data."""

    for rare, score in ((1, 100), (2, 110), (3, 120)):
        _log_run(character, rare_skills_count=rare, score=score)

    response = auth_client.get(reverse("core:character_stats", args=[character.pk]))

    assert response.status_code == 200
    payload = response.json()
    assert payload["character"]["characterName"] == "Special Week"
    assert payload["bestScore"] == 120
    rare = payload["impactAnalysis"]["scoreVsRareSkills"]
    assert rare["slope"] == approx(10.0)
    assert rare["intercept"] == approx(90.0)
    assert rare["correlation"] == approx(1.0)
    assert rare["dataPoints"] == [{"x": 1.0, "y": 100.0}, {"x": 2.0, "y": 110.0}, {"x": 3.0, "y": 120.0}]
    assert len(payload["trainingData"]) == 3
    assert len(payload["recentHistory"]) == 3


@pytest.mark.django_db
def test_character_stats_with_single_run_omits_regressions(auth_client, character) -> None:
    """One run is not enough for a regression; panels are null."""

    _log_run(character)

    payload = auth_client.get(reverse("core:character_stats", args=[character.pk])).json()

    assert payload["impactAnalysis"] == {
        "scoreVsRareSkills": None,
        "scoreVsNormalSkills": None,
        "scoreVsFinalPlace": None,
    }


@pytest.mark.django_db
def test_character_stats_are_player_scoped(auth_client) -> None:
    """Other players' characters return 404."""

    stranger = get_user_model().objects.create_user(username="bob", password="password")
    foreign = Character.objects.create(player=stranger.player, character_name="Rice Shower")

    response = auth_client.get(reverse("core:character_stats", args=[foreign.pk]))
    assert response.status_code == 404


@pytest.mark.django_db
def test_compare_requires_two_characters(auth_client, character) -> None:
    """Comparing a single character is a validation error."""

    response = auth_client.get(reverse("core:compare"), {"character": [character.pk]})

    assert response.status_code == 400
    assert response.json()["ok"] is False
    assert "character" in response.json()["errors"]


@pytest.mark.django_db
def test_compare_keeps_requested_order(auth_client, character) -> None:
    """Comparison rows follow the submitted character order."""

    other = Character.objects.create(player=character.player, character_name="Gold Ship")
    _log_run(character, score=12000)
    _log_run(other, score=15000)
    _log_run(other, score=17000)

    response = auth_client.get(reverse("core:compare"), {"character": [other.pk, character.pk]})

    assert response.status_code == 200
    rows = response.json()["characters"]
    assert [row["characterId"] for row in rows] == [other.pk, character.pk]
    assert rows[0]["averageScore"] == approx(16000.0)
    assert rows[1]["totalRuns"] == 1


@pytest.mark.django_db
def test_training_data_filters_by_track(auth_client, character) -> None:
    """The track filter restricts the flat training data."""

    _log_run(character, track="DIRT", score=9000)
    _log_run(character, track="TURF_LONG", score=11000)

    all_runs = auth_client.get(reverse("core:training_data")).json()["runs"]
    dirt_runs = auth_client.get(reverse("core:training_data"), {"track_type": "DIRT"}).json()["runs"]
    all_alias = auth_client.get(reverse("core:training_data"), {"track_type": "ALL"}).json()["runs"]

    assert len(all_runs) == 2
    assert len(all_alias) == 2
    assert [run["score"] for run in dirt_runs] == [9000]
    assert dirt_runs[0]["rareSkills"] == 1
    assert dirt_runs[0]["normalSkills"] == 4


@pytest.mark.django_db
def test_training_data_rejects_unknown_track(auth_client) -> None:
    """Unknown track names are a 400 validation error."""

    response = auth_client.get(reverse("core:training_data"), {"track_type": "SNOW"})
    assert response.status_code == 400


@pytest.mark.django_db
def test_impact_endpoint_filters_by_character(auth_client, character) -> None:
    """Impact analysis can be scoped to one character."""

    other = Character.objects.create(player=character.player, character_name="Gold Ship")
    _log_run(character, final_place=1, score=20000)
    _log_run(character, final_place=3, score=18000)
    _log_run(other, final_place=2, score=1000)

    payload = auth_client.get(reverse("core:impact"), {"character": character.pk}).json()

    assert payload["scoreVsFinalPlace"]["slope"] == approx(-1000.0)


@pytest.mark.django_db
def test_run_rejects_place_outside_race_field(character) -> None:
    """Runs must finish between 1st and 18th."""

    with pytest.raises(ValidationError):
        _log_run(character, final_place=19)


@pytest.mark.django_db
def test_run_rejects_character_from_another_player(player) -> None:
    """A run's character must belong to the run's player."""

    stranger = get_user_model().objects.create_user(username="bob", password="password")
    foreign = Character.objects.create(player=stranger.player, character_name="Rice Shower")

    with pytest.raises(ValidationError):
        Run.objects.create(player=player, character=foreign, track_type="DIRT", final_place=1, score=1)


@pytest.mark.django_db
def test_team_recommendations_rank_characters_per_track(auth_client, character) -> None:
    """Every track is listed; characters are ranked by their average on it."""

    rival = Character.objects.create(player=character.player, character_name="Gold Ship", identifier_version="v1")
    _log_run(character, track="DIRT", score=12000)
    _log_run(character, track="DIRT", score=14000)
    _log_run(rival, track="DIRT", score=15000)
    _log_run(rival, track="TURF_LONG", score=16000)
    _log_run(rival, track="TURF_LONG", score=18000)

    response = auth_client.get(reverse("core:team_recommendations"))

    assert response.status_code == 200
    payload = response.json()
    assert list(payload) == ["TURF_SHORT", "TURF_MILE", "TURF_MEDIUM", "TURF_LONG", "DIRT"]
    assert payload["TURF_SHORT"] == []
    assert [member["characterName"] for member in payload["DIRT"]] == ["Gold Ship", "Special Week"]
    assert payload["DIRT"][1] == {
        "id": character.pk,
        "characterName": "Special Week",
        "identifierVersion": "v1",
        "trackType": "DIRT",
        "averageScore": 13000.0,
        "totalRuns": 2,
        "mostPlayedTrack": "DIRT",
        "isMostPlayedTrack": True,
    }
    assert payload["DIRT"][0]["mostPlayedTrack"] == "TURF_LONG"
    assert payload["DIRT"][0]["isMostPlayedTrack"] is False


@pytest.mark.django_db
def test_team_recommendations_exclude_other_players(auth_client, character) -> None:
    """Another player's characters never appear in the recommendations."""

    stranger = get_user_model().objects.create_user(username="bob", password="password")
    foreign = Character.objects.create(player=stranger.player, character_name="Rice Shower")
    _log_run(foreign, track="TURF_MILE", score=30000)

    payload = auth_client.get(reverse("core:team_recommendations")).json()

    assert payload["TURF_MILE"] == []


@pytest.mark.django_db
def test_pending_runs_lists_runs_without_details(auth_client, character) -> None:
    """Only runs with no skills counted and every flag unset are pending."""

    waiting = _log_run(character, track="DIRT", rare_skills_count=0, normal_skills_count=0, score=9000)
    _log_run(character, track="DIRT", rare_skills_count=0, normal_skills_count=0, rushed=True, score=9100)
    _log_run(character, track="TURF_MILE", score=9200)
    waiting_mile = _log_run(character, track="TURF_MILE", rare_skills_count=0, normal_skills_count=0, score=9300)

    runs = auth_client.get(reverse("core:pending_runs")).json()["runs"]
    dirt_runs = auth_client.get(reverse("core:pending_runs"), {"track_type": "DIRT"}).json()["runs"]

    assert [run["id"] for run in runs] == [waiting.pk, waiting_mile.pk]
    assert [run["id"] for run in dirt_runs] == [waiting.pk]
    assert runs[0]["rareSkillsCount"] == 0
