"""Database models for logged Team Trials runs."""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from analysis.categories import TRACK_CHOICES
from player_state.models import Character, Player

MIN_FINAL_PLACE = 1
MAX_FINAL_PLACE = 18


class Run(models.Model):
    """One logged Team Trials race attempt for a character."""

    player = models.ForeignKey(Player, on_delete=models.CASCADE, related_name="runs")
    character = models.ForeignKey(Character, on_delete=models.CASCADE, related_name="runs")
    track_type = models.CharField(max_length=20, choices=TRACK_CHOICES)
    final_place = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_FINAL_PLACE), MaxValueValidator(MAX_FINAL_PLACE)],
    )
    rare_skills_count = models.PositiveSmallIntegerField(default=0)
    normal_skills_count = models.PositiveSmallIntegerField(default=0)
    unique_skill_activated = models.BooleanField(default=False)
    good_positioning = models.BooleanField(default=False)
    rushed = models.BooleanField(default=False)
    score = models.PositiveIntegerField()
    date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date", "id"]
        indexes = [
            models.Index(fields=["player", "track_type"], name="run_player_track_idx"),
        ]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Run(character={self.character_id}, track={self.track_type}, place={self.final_place}, score={self.score})"

    def clean(self) -> None:
        """Validate that the run stays within a single owning player."""

        if self.character_id and self.player_id and self.character.player_id != self.player_id:
            raise ValidationError("Run.player must match character.player.")

    def save(self, *args, **kwargs) -> None:
        """Save while enforcing field ranges and ownership invariants."""

        self.full_clean()
        super().save(*args, **kwargs)

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation including the character label."""

        return {
            "id": self.pk,
            "characterId": self.character_id,
            "characterName": self.character.character_name,
            "identifierVersion": self.character.identifier_version,
            "trackType": self.track_type,
            "finalPlace": self.final_place,
            "rareSkillsCount": self.rare_skills_count,
            "normalSkillsCount": self.normal_skills_count,
            "uniqueSkillActivated": self.unique_skill_activated,
            "goodPositioning": self.good_positioning,
            "rushed": self.rushed,
            "score": self.score,
            "date": self.date.isoformat(),
        }
