"""Доменный слой: запросы, результаты, ошибки."""

from coach_core.domain.errors import (
    ApiKeyError,
    ClassifiedError,
    CoachAPIError,
    ErrorKind,
    GenerationError,
    MalformedOutputError,
    NoImageReturnedError,
    OperationCancelledError,
    SafetyBlockedError,
    ServiceOverloadedError,
    SessionBusyError,
)
from coach_core.domain.requests import (
    ChatTurn,
    FailurePolicy,
    InputPart,
    MediaPayload,
    ModelTier,
    OperationKind,
    OperationRequest,
    ResponseKind,
)
from coach_core.domain.results import (
    Citation,
    Exercise,
    FoodList,
    GroundedAnswer,
    Macronutrients,
    Micronutrient,
    NutritionInfo,
    WorkoutDay,
    WorkoutPlan,
)

__all__ = [
    # errors
    "ApiKeyError",
    "ClassifiedError",
    "CoachAPIError",
    "ErrorKind",
    "GenerationError",
    "MalformedOutputError",
    "NoImageReturnedError",
    "OperationCancelledError",
    "SafetyBlockedError",
    "ServiceOverloadedError",
    "SessionBusyError",
    # requests
    "ChatTurn",
    "FailurePolicy",
    "InputPart",
    "MediaPayload",
    "ModelTier",
    "OperationKind",
    "OperationRequest",
    "ResponseKind",
    # results
    "Citation",
    "Exercise",
    "FoodList",
    "GroundedAnswer",
    "Macronutrients",
    "Micronutrient",
    "NutritionInfo",
    "WorkoutDay",
    "WorkoutPlan",
]
