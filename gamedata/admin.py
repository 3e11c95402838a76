"""Admin registrations for GameData models."""

from __future__ import annotations

from django.contrib import admin

from gamedata.models import Run
from player_state.admin import PlayerScopedAdmin


@admin.register(Run)
class RunAdmin(PlayerScopedAdmin):
    """Admin configuration for Run."""

    list_display = (
        "character",
        "track_type",
        "final_place",
        "rare_skills_count",
        "normal_skills_count",
        "score",
        "date",
    )
    list_filter = ("track_type", "rushed", "good_positioning", "unique_skill_activated")
    date_hierarchy = "date"

    def formfield_for_foreignkey(self, db_field, request, **kwargs):  # type: ignore[override]
        """Scope character choices to the authenticated user's Player."""

        if (
            not request.user.is_superuser
            and db_field.name == "character"
            and hasattr(request.user, "player")
        ):
            base_qs = kwargs.get("queryset") or db_field.remote_field.model._default_manager.all()
            kwargs["queryset"] = base_qs.filter(player=request.user.player)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)
