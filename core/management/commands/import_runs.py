"""Import Team Trials runs for a character from a YAML file."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from core.forms import RunImportForm
from player_state.models import Character, Player

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Validate and import a list of runs for one character."""

    help = "Import runs from a YAML list of run mappings (validated row by row)."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("path", help="Path to a YAML file containing a list of runs.")
        parser.add_argument("--username", required=True, help="Owner of the imported runs.")
        parser.add_argument("--character", required=True, help="Character name the runs belong to.")
        parser.add_argument(
            "--identifier-version",
            default="",
            dest="identifier_version",
            help="Character identifier version (created when missing).",
        )
        parser.add_argument(
            "--check",
            action="store_true",
            help="Dry-run: validate rows and report without writing.",
        )
        parser.add_argument(
            "--write",
            action="store_true",
            help="Write valid rows to the database.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        check: bool = options["check"]
        write: bool = options["write"]
        if check and write:
            raise CommandError("Use either --check or --write, not both.")
        if not check and not write:
            raise CommandError("Refusing to write without explicit intent; pass --check or --write.")

        rows = _load_rows(Path(options["path"]))
        player = _player_for_username(options["username"])

        totals = {"rows": 0, "valid": 0, "invalid": 0, "created": 0}
        forms: list[RunImportForm] = []
        for position, row in enumerate(rows, start=1):
            totals["rows"] += 1
            if not isinstance(row, dict):
                totals["invalid"] += 1
                self.stderr.write(f"Row {position}: expected a mapping, got {type(row).__name__}.")
                continue
            form = RunImportForm(data=row)
            if not form.is_valid():
                totals["invalid"] += 1
                self.stderr.write(f"Row {position}: {form.errors.as_text()}")
                continue
            totals["valid"] += 1
            forms.append(form)

        if write and forms:
            with transaction.atomic():
                character, created = Character.objects.get_or_create(
                    player=player,
                    character_name=options["character"],
                    identifier_version=options["identifier_version"],
                )
                if created:
                    logger.info("Created character %s for %s", character, player)
                for form in forms:
                    run = form.save(commit=False)
                    run.player = player
                    run.character = character
                    run.save()
                    totals["created"] += 1
            logger.info("Imported %s runs for %s", totals["created"], character)

        mode = "write" if write else "check"
        summary = " ".join(f"{key}={value}" for key, value in totals.items())
        self.stdout.write(f"import_runs ({mode}): {summary}")
        return None


def _load_rows(path: Path) -> list[object]:
    """Read the YAML run list from disk.

    Args:
        path: YAML file path.

    Returns:
        The parsed list of rows.

    Raises:
        CommandError: When the file is missing, unparsable, or not a list.
    """

    if not path.exists():
        raise CommandError(f"File not found: {path}")
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise CommandError(f"Invalid YAML in {path}: {exc}") from exc
    if payload is None:
        return []
    if isinstance(payload, dict):
        payload = payload.get("runs")
    if not isinstance(payload, list):
        raise CommandError("Expected a list of runs (or a mapping with a `runs` list).")
    return payload


def _player_for_username(username: str) -> Player:
    """Return the Player for a username, raising CommandError when unknown."""

    user_model = get_user_model()
    try:
        user = user_model.objects.get(username=username)
    except user_model.DoesNotExist as exc:
        raise CommandError(f"Unknown user: {username}") from exc
    player, _ = Player.objects.get_or_create(user=user, defaults={"display_name": user.username})
    return player
