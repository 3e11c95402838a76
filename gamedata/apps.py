"""Django app configuration for GameData."""

from __future__ import annotations

from django.apps import AppConfig


class GameDataConfig(AppConfig):
    """AppConfig for logged Team Trials runs."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "gamedata"
    verbose_name = "Team Trials runs"
