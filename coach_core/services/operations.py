"""Реестр операций клиента.

Каждая операция описывается один раз: класс модели, вид ответа,
схема, политика сбоя и fallback. Сервис выполняет их единым конвейером.

Классы:
    OperationSpec
        Описание операции.

Константы:
    OPERATIONS
        OperationKind -> OperationSpec.
"""

from dataclasses import dataclass
from typing import Any, Optional

from coach_core.domain.requests import FailurePolicy, ModelTier, OperationKind, ResponseKind
from coach_core.domain.results import NutritionInfo, WorkoutDay


@dataclass(frozen=True)
class OperationSpec:
    """Описание операции.

    Attributes:
        kind: Идентификатор операции.
        tier: Класс модели.
        response_kind: Как разбирать ответ.
        schema: Тип структурированного ответа (только для JSON).
        use_search: Включить Google Search grounding.
        on_failure: PROPAGATE или SUPPRESS.
        fallback: Значение при подавленном сбое.
        failure_prefix: Префикс сообщения GenerationError.
        use_persona: Подставлять персону ассистента как system instruction.
    """

    kind: OperationKind
    tier: ModelTier
    response_kind: ResponseKind
    schema: Any = None
    use_search: bool = False
    on_failure: FailurePolicy = FailurePolicy.PROPAGATE
    fallback: Optional[Any] = None
    failure_prefix: str = "Gemini API request failed"
    use_persona: bool = False

    @property
    def best_effort(self) -> bool:
        return self.on_failure is FailurePolicy.SUPPRESS


OPERATIONS: dict[OperationKind, OperationSpec] = {
    OperationKind.VIDEO_ANALYSIS: OperationSpec(
        kind=OperationKind.VIDEO_ANALYSIS,
        tier=ModelTier.FULL,
        response_kind=ResponseKind.TEXT,
        failure_prefix="Failed to get analysis from Gemini API",
    ),
    OperationKind.WORKOUT_PLAN: OperationSpec(
        kind=OperationKind.WORKOUT_PLAN,
        tier=ModelTier.FULL,
        response_kind=ResponseKind.JSON,
        schema=list[WorkoutDay],
        failure_prefix="Failed to generate workout plan",
    ),
    OperationKind.GROUNDED_ANSWER: OperationSpec(
        kind=OperationKind.GROUNDED_ANSWER,
        tier=ModelTier.FULL,
        response_kind=ResponseKind.GROUNDED,
        use_search=True,
        failure_prefix="Failed to get an answer from Gemini API",
    ),
    OperationKind.POSE_ANALYSIS: OperationSpec(
        kind=OperationKind.POSE_ANALYSIS,
        tier=ModelTier.FULL,
        response_kind=ResponseKind.TEXT,
        failure_prefix="Failed to analyze pose",
    ),
    OperationKind.IMAGE_EDIT: OperationSpec(
        kind=OperationKind.IMAGE_EDIT,
        tier=ModelTier.IMAGE,
        response_kind=ResponseKind.IMAGE,
        failure_prefix="Failed to edit image",
    ),
    OperationKind.CHAT: OperationSpec(
        kind=OperationKind.CHAT,
        tier=ModelTier.FULL,
        response_kind=ResponseKind.TEXT,
        failure_prefix="Failed to get chat response from Gemini API",
        use_persona=True,
    ),
    OperationKind.QUICK_CHAT: OperationSpec(
        kind=OperationKind.QUICK_CHAT,
        tier=ModelTier.LITE,
        response_kind=ResponseKind.TEXT,
        on_failure=FailurePolicy.SUPPRESS,
        fallback="",
        use_persona=True,
    ),
    OperationKind.QUICK_REPLY: OperationSpec(
        kind=OperationKind.QUICK_REPLY,
        tier=ModelTier.LITE,
        response_kind=ResponseKind.TEXT,
        on_failure=FailurePolicy.SUPPRESS,
        fallback="",
    ),
    OperationKind.FOOD_RECOGNITION: OperationSpec(
        kind=OperationKind.FOOD_RECOGNITION,
        tier=ModelTier.FULL,
        response_kind=ResponseKind.JSON,
        schema=list[str],
        failure_prefix="Failed to recognize food",
    ),
    OperationKind.NUTRITION_ANALYSIS: OperationSpec(
        kind=OperationKind.NUTRITION_ANALYSIS,
        tier=ModelTier.FULL,
        response_kind=ResponseKind.JSON,
        schema=NutritionInfo,
        failure_prefix="Failed to get nutritional analysis",
    ),
    OperationKind.VIDEO_LOOKUP: OperationSpec(
        kind=OperationKind.VIDEO_LOOKUP,
        tier=ModelTier.LITE,
        response_kind=ResponseKind.LINK,
        use_search=True,
        on_failure=FailurePolicy.SUPPRESS,
        fallback=None,
    ),
    OperationKind.AUDIO_TRANSCRIPTION: OperationSpec(
        kind=OperationKind.AUDIO_TRANSCRIPTION,
        tier=ModelTier.FULL,
        response_kind=ResponseKind.TEXT,
        failure_prefix="Failed to transcribe audio",
    ),
}


def get_operation(kind: OperationKind) -> OperationSpec:
    return OPERATIONS[kind]


__all__ = ["OPERATIONS", "OperationSpec", "get_operation"]
