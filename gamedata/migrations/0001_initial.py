"""Create Run, the logged Team Trials race attempt."""

from __future__ import annotations

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    """Initial schema for runtime run data."""

    initial = True

    dependencies = [
        ("player_state", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Run",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "track_type",
                    models.CharField(
                        choices=[
                            ("TURF_SHORT", "Turf Short"),
                            ("TURF_MILE", "Turf Mile"),
                            ("TURF_MEDIUM", "Turf Medium"),
                            ("TURF_LONG", "Turf Long"),
                            ("DIRT", "Dirt"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "final_place",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(18),
                        ]
                    ),
                ),
                ("rare_skills_count", models.PositiveSmallIntegerField(default=0)),
                ("normal_skills_count", models.PositiveSmallIntegerField(default=0)),
                ("unique_skill_activated", models.BooleanField(default=False)),
                ("good_positioning", models.BooleanField(default=False)),
                ("rushed", models.BooleanField(default=False)),
                ("score", models.PositiveIntegerField()),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "character",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="runs",
                        to="player_state.character",
                    ),
                ),
                (
                    "player",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="runs",
                        to="player_state.player",
                    ),
                ),
            ],
            options={
                "ordering": ["date", "id"],
                "indexes": [models.Index(fields=["player", "track_type"], name="run_player_track_idx")],
            },
        ),
    ]
