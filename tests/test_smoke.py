"""Minimal smoke tests for project wiring."""

from __future__ import annotations

import pytest


@pytest.mark.unit
def test_analysis_public_entry_points() -> None:
    """The analysis package exposes the predictor and the regression analyzer."""

    import analysis

    assert callable(analysis.predict)
    assert callable(analysis.analyze)
    assert callable(analysis.impact_analysis)


@pytest.mark.unit
def test_analysis_does_not_import_django() -> None:
    """The analysis modules stay free of Django imports."""

    from pathlib import Path

    package_dir = Path(__file__).resolve().parent.parent / "analysis"
    for module in package_dir.glob("*.py"):
        source = module.read_text(encoding="utf-8")
        assert "import django" not in source, module.name
        assert "from django" not in source, module.name


@pytest.mark.integration
def test_django_project_loads() -> None:
    """Settings load and register the project apps."""

    from django.conf import settings

    assert "core.apps.CoreConfig" in settings.INSTALLED_APPS
    assert settings.TEAM_TRIALS_NEIGHBOR_COUNT >= 1


def _load_settings_module() -> dict[str, object]:
    """Execute the settings module from source with the current environment."""

    import runpy
    from pathlib import Path

    settings_path = Path(__file__).resolve().parent.parent / "teamTrials" / "settings.py"
    return runpy.run_path(str(settings_path))


@pytest.mark.integration
def test_settings_reject_non_positive_neighbor_count(monkeypatch) -> None:
    """A neighbor count below 1 fails at startup instead of on the first prediction."""

    monkeypatch.setenv("TEAM_TRIALS_NEIGHBOR_COUNT", "0")

    with pytest.raises(RuntimeError, match="TEAM_TRIALS_NEIGHBOR_COUNT"):
        _load_settings_module()


@pytest.mark.integration
def test_settings_read_neighbor_count_from_environment(monkeypatch) -> None:
    """The neighbor count environment variable overrides the default."""

    monkeypatch.setenv("TEAM_TRIALS_NEIGHBOR_COUNT", "7")

    assert _load_settings_module()["TEAM_TRIALS_NEIGHBOR_COUNT"] == 7
