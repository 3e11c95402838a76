"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("api/stats/dashboard/", views.dashboard_stats_api, name="dashboard_stats"),
    path("api/stats/characters/<int:pk>/", views.character_stats_api, name="character_stats"),
    path("api/stats/compare/", views.compare_api, name="compare"),
    path("api/stats/training-data/", views.training_data_api, name="training_data"),
    path("api/stats/impact/", views.impact_api, name="impact"),
    path("api/stats/team-recommendations/", views.team_recommendations_api, name="team_recommendations"),
    path("api/runs/pending/", views.pending_runs_api, name="pending_runs"),
    path("api/simulator/predict/", views.simulator_api, name="simulator"),
    path("api/characters/<int:pk>/predict/", views.character_simulator_api, name="character_simulator"),
]
