#!/usr/bin/env python
"""Command-line entry point for Team Trials administration.

Runs Django management commands such as `migrate`, `runserver`, and the
project's own `import_runs`.
"""

from __future__ import annotations

import os
import sys


def main() -> None:
    """Dispatch the requested management command."""

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "teamTrials.settings")
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django is not installed or is not available on your PYTHONPATH."
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
