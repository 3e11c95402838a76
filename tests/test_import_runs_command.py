"""Integration tests for the `import_runs` management command."""

from __future__ import annotations

from datetime import date
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from gamedata.models import Run
from player_state.models import Character

pytestmark = pytest.mark.integration

RUNS_YAML = """\
runs:
  - track_type: TURF_MILE
    final_place: 2
    rare_skills_count: 3
    normal_skills_count: 7
    rushed: true
    score: 15200
    date: 2025-06-01
  - track_type: DIRT
    final_place: 1
    score: 18100
  - track_type: DIRT
    final_place: 25
    score: 100
"""


@pytest.fixture
def runs_file(tmp_path):
    path = tmp_path / "runs.yaml"
    path.write_text(RUNS_YAML, encoding="utf-8")
    return path


@pytest.mark.django_db
def test_import_runs_check_does_not_write(user, runs_file) -> None:
    """`--check` validates rows and writes nothing."""

    out = StringIO()
    err = StringIO()
    call_command(
        "import_runs",
        str(runs_file),
        username=user.username,
        character="Special Week",
        check=True,
        stdout=out,
        stderr=err,
    )

    assert "rows=3 valid=2 invalid=1 created=0" in out.getvalue()
    assert "Row 3" in err.getvalue()
    assert Run.objects.count() == 0
    assert not Character.objects.exists()


@pytest.mark.django_db
def test_import_runs_write_creates_character_and_runs(user, runs_file) -> None:
    """`--write` creates the character when missing and saves valid rows."""

    out = StringIO()
    call_command(
        "import_runs",
        str(runs_file),
        username=user.username,
        character="Special Week",
        identifier_version="summer",
        write=True,
        stdout=out,
        stderr=StringIO(),
    )

    character = Character.objects.get(player=user.player, character_name="Special Week")
    assert character.identifier_version == "summer"
    runs = list(Run.objects.filter(character=character).order_by("id"))
    assert [run.score for run in runs] == [15200, 18100]
    assert runs[0].rushed is True
    assert runs[0].date == date(2025, 6, 1)
    assert runs[1].rare_skills_count == 0
    assert "created=2" in out.getvalue()


@pytest.mark.django_db
def test_import_runs_requires_explicit_mode(user, runs_file) -> None:
    """Refuse to run without --check or --write."""

    with pytest.raises(CommandError):
        call_command("import_runs", str(runs_file), username=user.username, character="Special Week")


@pytest.mark.django_db
def test_import_runs_rejects_unknown_user(runs_file) -> None:
    """Unknown usernames raise a CommandError."""

    with pytest.raises(CommandError, match="Unknown user"):
        call_command("import_runs", str(runs_file), username="nobody", character="X", check=True)


@pytest.mark.django_db
def test_import_runs_parses_command_line_flags(user, runs_file) -> None:
    """Flags given as command-line strings reach the command, including the identifier version."""

    out = StringIO()
    call_command(
        "import_runs",
        str(runs_file),
        "--username",
        user.username,
        "--character",
        "Special Week",
        "--identifier-version",
        "v2",
        "--write",
        stdout=out,
        stderr=StringIO(),
    )

    character = Character.objects.get(player=user.player, character_name="Special Week")
    assert character.identifier_version == "v2"
    assert Run.objects.filter(character=character).count() == 2
    assert "import_runs (write): rows=3 valid=2 invalid=1 created=2" in out.getvalue()
