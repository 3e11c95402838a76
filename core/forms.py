"""Forms validating query parameters and imported rows for the core app.

The simulator form enforces the slider ranges offered by the UI. The analysis
engine itself never clamps or rejects query values.
"""

from __future__ import annotations

from django import forms

from analysis.categories import TRACK_CHOICES, TrackType, coerce_track_type
from analysis.dto import QueryPoint
from gamedata.models import MAX_FINAL_PLACE, MIN_FINAL_PLACE, Run
from player_state.models import Character, Player

ALL_TRACKS = "ALL"

MAX_SIMULATED_RARE_SKILLS = 10
MAX_SIMULATED_NORMAL_SKILLS = 20
MAX_NEIGHBOR_COUNT = 50


class TrackFilterForm(forms.Form):
    """Optional track-type filter shared by the stats endpoints."""

    track_type = forms.ChoiceField(
        required=False,
        choices=(("", "All tracks"), (ALL_TRACKS, "All tracks"), *TRACK_CHOICES),
    )

    def selected_track(self) -> TrackType | None:
        """Return the selected TrackType, or None for all tracks."""

        return coerce_track_type(self.cleaned_data.get("track_type"))


class PlayerCharacterFilterForm(TrackFilterForm):
    """Track filter plus an optional character scoped to the request player."""

    character = forms.ModelChoiceField(queryset=Character.objects.none(), required=False)

    def __init__(self, *args, player: Player, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fields["character"].queryset = Character.objects.filter(player=player)


class SimulatorForm(TrackFilterForm):
    """Validate simulator inputs for a score prediction."""

    rare_skills = forms.IntegerField(min_value=0, max_value=MAX_SIMULATED_RARE_SKILLS, initial=2)
    normal_skills = forms.IntegerField(min_value=0, max_value=MAX_SIMULATED_NORMAL_SKILLS, initial=4)
    final_place = forms.IntegerField(min_value=MIN_FINAL_PLACE, max_value=MAX_FINAL_PLACE, initial=1)
    rushed = forms.BooleanField(required=False)
    good_positioning = forms.BooleanField(required=False)
    unique_skill = forms.BooleanField(required=False)
    k = forms.IntegerField(required=False, min_value=1, max_value=MAX_NEIGHBOR_COUNT)

    def query_point(self) -> QueryPoint:
        """Build the QueryPoint from cleaned data."""

        data = self.cleaned_data
        return QueryPoint(
            rare_skills_count=data["rare_skills"],
            normal_skills_count=data["normal_skills"],
            final_place=data["final_place"],
            rushed=bool(data.get("rushed")),
            good_positioning=bool(data.get("good_positioning")),
            unique_skill_activated=bool(data.get("unique_skill")),
        )


class ComparisonForm(forms.Form):
    """Select two or more of the player's characters to compare."""

    character = forms.ModelMultipleChoiceField(queryset=Character.objects.none())

    def __init__(self, *args, player: Player, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fields["character"].queryset = Character.objects.filter(player=player)

    def clean_character(self) -> list[Character]:
        """Require at least two characters and keep the submitted order.

        Returns:
            Characters in the order their ids were submitted.
        """

        selected = self.cleaned_data.get("character")
        if selected is None or len(selected) < 2:
            raise forms.ValidationError("Select at least two characters to compare.")
        by_id = {str(character.pk): character for character in selected}
        submitted = self.data.getlist("character") if hasattr(self.data, "getlist") else []
        ordered: list[Character] = []
        for raw_id in submitted:
            character = by_id.pop(str(raw_id), None)
            if character is not None:
                ordered.append(character)
        ordered.extend(by_id.values())
        return ordered


class RunImportForm(forms.ModelForm):
    """Validate one imported run row before it is written."""

    class Meta:
        model = Run
        fields = [
            "track_type",
            "final_place",
            "rare_skills_count",
            "normal_skills_count",
            "unique_skill_activated",
            "good_positioning",
            "rushed",
            "score",
            "date",
        ]

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        # Omitted values fall back to the model defaults.
        for name in ("rare_skills_count", "normal_skills_count", "date"):
            self.fields[name].required = False
