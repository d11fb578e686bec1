"""Coach Core - устойчивый клиент Gemini для фитнес-ассистента.

Архитектура:
    Domain: DTO запросов, результатов и ошибок.
    Interfaces: Контракт транспорта (BaseTransport).
    Infrastructure: GeminiTransport, повторы, сборка запросов, разбор ответов, чат.
    Services: CoachService и реестр операций.

Пример:
    >>> import asyncio
    >>> from coach_core import CoachService
    >>>
    >>> async def main():
    ...     service = CoachService.from_config()
    ...     plan = await service.generate_workout_plan(
    ...         equipment="dumbbells",
    ...         level="beginner",
    ...         goal="build strength",
    ...     )
    ...     for day in plan:
    ...         print(day.day, [exercise.name for exercise in day.exercises])
    >>>
    >>> asyncio.run(main())
"""

from coach_core.config import CoachConfig, get_config
from coach_core.domain import (
    ApiKeyError,
    ChatTurn,
    Citation,
    CoachAPIError,
    ErrorKind,
    Exercise,
    GenerationError,
    GroundedAnswer,
    MalformedOutputError,
    MediaPayload,
    NoImageReturnedError,
    NutritionInfo,
    OperationCancelledError,
    SafetyBlockedError,
    ServiceOverloadedError,
    SessionBusyError,
    WorkoutDay,
)
from coach_core.infrastructure.gemini import ChatSession, FragmentStream, GeminiTransport
from coach_core.interfaces import BaseTransport
from coach_core.services import CoachService

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CoachConfig",
    "get_config",
    "CoachService",
    "BaseTransport",
    "GeminiTransport",
    "ChatSession",
    "FragmentStream",
    "ChatTurn",
    "MediaPayload",
    "Citation",
    "Exercise",
    "GroundedAnswer",
    "NutritionInfo",
    "WorkoutDay",
    "ApiKeyError",
    "CoachAPIError",
    "ErrorKind",
    "GenerationError",
    "MalformedOutputError",
    "NoImageReturnedError",
    "OperationCancelledError",
    "SafetyBlockedError",
    "ServiceOverloadedError",
    "SessionBusyError",
]
