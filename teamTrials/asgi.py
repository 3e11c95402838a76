"""ASGI entry point for the Team Trials stats dashboard.

The JSON API is synchronous; ASGI servers run it through Django's sync adapter.
"""

from __future__ import annotations

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "teamTrials.settings")

application = get_asgi_application()
