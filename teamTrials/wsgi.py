"""WSGI entry point for the Team Trials stats dashboard.

Production servers (e.g. gunicorn) import `application` from this module.
"""

from __future__ import annotations

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "teamTrials.settings")

application = get_wsgi_application()
