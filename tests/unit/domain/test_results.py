"""Тесты моделей результатов domain/results.py."""

import pytest
from pydantic import TypeAdapter, ValidationError

from coach_core.domain.results import (
    Citation,
    GroundedAnswer,
    NutritionInfo,
    WorkoutDay,
    WorkoutPlan,
)


class TestWorkoutPlan:
    def test_order_preserved(self):
        plan = TypeAdapter(WorkoutPlan).validate_python(
            [
                {"day": "Monday", "exercises": [
                    {"name": "Deadlift", "sets": "5", "reps": "5"},
                    {"name": "Plank", "sets": "3", "reps": "30s"},
                ]},
                {"day": "Wednesday", "exercises": []},
            ]
        )

        assert [d.day for d in plan] == ["Monday", "Wednesday"]
        assert [e.name for e in plan[0].exercises] == ["Deadlift", "Plank"]
        assert plan[0].exercises[1].reps == "30s"

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            WorkoutDay.model_validate({"exercises": []})


class TestNutritionInfo:
    def test_schema_has_all_sections(self):
        properties = NutritionInfo.model_json_schema()["properties"]
        assert set(properties) == {"calories", "macronutrients", "vitamins", "minerals"}


class TestGroundedAnswer:
    def test_sources_alias(self):
        answer = GroundedAnswer("text", [Citation("https://a.example")])

        assert answer.sources == answer.citations
        assert answer.sources[0].title is None

    def test_default_citations(self):
        assert GroundedAnswer("text").citations == []
