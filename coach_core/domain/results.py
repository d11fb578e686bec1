"""Типизированные результаты операций.

Pydantic-модели одновременно служат response_schema для Gemini
и схемой валидации разобранного JSON.

Классы:
    Exercise, WorkoutDay
        План тренировок: упорядоченные дни, в каждом упорядоченные упражнения.
    Macronutrients, Micronutrient, NutritionInfo
        Оценка пищевой ценности.
    Citation, GroundedAnswer
        Ответ с источниками из Google Search.

Типы:
    WorkoutPlan = list[WorkoutDay]
    FoodList = list[str]
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel


class Exercise(BaseModel):
    """Упражнение в дне плана. sets/reps - строки ("3", "8-12", "30s")."""

    name: str
    sets: str
    reps: str


class WorkoutDay(BaseModel):
    day: str
    exercises: list[Exercise]


WorkoutPlan = list[WorkoutDay]
FoodList = list[str]


class Macronutrients(BaseModel):
    """Макронутриенты в граммах."""

    protein: float
    carbohydrates: float
    fat: float


class Micronutrient(BaseModel):
    """Витамин или минерал: название и количество с единицами ("90 mg")."""

    name: str
    amount: str


class NutritionInfo(BaseModel):
    calories: float
    macronutrients: Macronutrients
    vitamins: list[Micronutrient]
    minerals: list[Micronutrient]


@dataclass(frozen=True)
class Citation:
    uri: str
    title: Optional[str] = None


@dataclass
class GroundedAnswer:
    """Ответ модели с цитатами.

    Attributes:
        text: Текст ответа.
        citations: Источники в порядке метаданных, без повторов URI.
    """

    text: str
    citations: list[Citation] = field(default_factory=list)

    @property
    def sources(self) -> list[Citation]:
        return self.citations
