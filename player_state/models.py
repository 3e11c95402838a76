"""Database models for player ownership and trained characters."""

from __future__ import annotations

from django.conf import settings
from django.db import models


class Player(models.Model):
    """The owner of characters and runs, bound to a single auth user."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="player",
    )
    display_name = models.CharField(max_length=80, default="Player")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        """Return the player name for display contexts."""

        return self.display_name


class Character(models.Model):
    """A trained character entered into Team Trials by a player.

    The same character can be trained several times; `identifier_version`
    distinguishes the builds (e.g. outfit or training attempt label).
    """

    player = models.ForeignKey(Player, on_delete=models.CASCADE, related_name="characters")
    character_name = models.CharField(max_length=120)
    identifier_version = models.CharField(max_length=80, blank=True, default="")
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["character_name", "identifier_version", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["player", "character_name", "identifier_version"],
                name="uniq_player_character_version",
            )
        ]

    def __str__(self) -> str:
        """Return character name plus version label."""

        if self.identifier_version:
            return f"{self.character_name} ({self.identifier_version})"
        return self.character_name

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "id": self.pk,
            "characterName": self.character_name,
            "identifierVersion": self.identifier_version,
            "notes": self.notes,
        }
