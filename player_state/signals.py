"""Signals for Player lifecycle."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from player_state.models import Player

logger = logging.getLogger(__name__)

UserModel = get_user_model()


@receiver(post_save, sender=UserModel)
def ensure_player_for_user(sender, instance, created: bool, **kwargs) -> None:
    """Create a Player record whenever a new User is created.

    The Player is derived from `instance` and never from user input.
    """

    if kwargs.get("raw", False):
        return

    if not created:
        return

    if Player.objects.filter(user=instance).exists():
        return

    Player.objects.create(user=instance, display_name=instance.username)
    logger.info("Created player for user %s", instance.username)
