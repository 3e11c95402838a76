"""Admin registrations for player state models."""

from __future__ import annotations

from django.contrib import admin
from django.db.models import QuerySet

from player_state.models import Character, Player


class PlayerScopedAdmin(admin.ModelAdmin):
    """ModelAdmin that enforces per-player queryset filtering and ownership on create."""

    player_field_name = "player"

    def get_queryset(self, request) -> QuerySet:
        """Return a queryset scoped to the authenticated user's Player."""

        qs = super().get_queryset(request)
        if request.user.is_superuser:
            return qs
        return qs.filter(**{f"{self.player_field_name}__user": request.user})

    def get_readonly_fields(self, request, obj=None):  # type: ignore[override]
        """Prevent non-superusers from reassigning ownership fields."""

        readonly = list(super().get_readonly_fields(request, obj=obj))
        if not request.user.is_superuser and self.player_field_name not in readonly:
            readonly.append(self.player_field_name)
        return tuple(readonly)

    def save_model(self, request, obj, form, change) -> None:  # type: ignore[override]
        """Assign player ownership automatically for non-superusers."""

        if not request.user.is_superuser and not change:
            setattr(obj, self.player_field_name, request.user.player)
        super().save_model(request, obj, form, change)


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):
    """Admin configuration for Player."""

    list_display = ("display_name", "user", "created_at")
    search_fields = ("display_name", "user__username")


@admin.register(Character)
class CharacterAdmin(PlayerScopedAdmin):
    """Admin configuration for Character."""

    list_display = ("character_name", "identifier_version", "player", "updated_at")
    list_filter = ("player",)
    search_fields = ("character_name", "identifier_version")
