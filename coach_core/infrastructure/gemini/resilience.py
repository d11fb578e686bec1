"""Классификация ошибок и повторы вызовов Gemini.

Классы:
    RetryState
        Состояние повторов одного вызова.

Функции:
    classify_error
        Сопоставляет сбой транспорта с ErrorKind.
    run_with_retry
        Выполняет асинхронную попытку с exponential backoff без jitter.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar, Union

from coach_core.domain.errors import (
    ClassifiedError,
    CoachAPIError,
    ErrorKind,
    OperationCancelledError,
    error_for,
)
from coach_core.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[int, int], Union[None, Awaitable[None]]]

DEFAULT_FAILURE_PREFIX = "Gemini API request failed"

# Проверяются по порядку, первое совпадение выигрывает
AUTH_PATTERNS = (
    "api key not valid",
    "api_key_invalid",
    "invalid api key",
    "api key is missing",
    "missing api key",
    "api key not found",
)

OVERLOADED_PATTERNS = (
    "overloaded",
    "503",
    "unavailable",
)


def classify_error(error: BaseException) -> ClassifiedError:
    """Классифицирует сбой по тексту сообщения.

    Args:
        error: Исключение транспорта.

    Returns:
        ClassifiedError: AUTHENTICATION, OVERLOADED (retryable) или GENERIC.
    """
    message = str(error)
    lowered = message.lower()

    if any(pattern in lowered for pattern in AUTH_PATTERNS):
        kind, retryable = ErrorKind.AUTHENTICATION, False
    elif any(pattern in lowered for pattern in OVERLOADED_PATTERNS):
        kind, retryable = ErrorKind.OVERLOADED, True
    else:
        kind, retryable = ErrorKind.GENERIC, False

    logger.trace(
        "Error classification",
        error_type=type(error).__name__,
        kind=kind.value,
        is_retryable=retryable,
        error_preview=lowered[:100],
    )
    return ClassifiedError(kind=kind, message=message, retryable=retryable)


@dataclass
class RetryState:
    """Состояние повторов одного вызова.

    Attributes:
        attempt: Индекс текущей попытки, с нуля.
        max_attempts: Всего попыток (3 = 1 + 2 повтора).
        base_delay: Пауза перед первым повтором.
    """

    attempt: int = 0
    max_attempts: int = 3
    base_delay: float = 2.0

    @property
    def next_delay(self) -> float:
        """Пауза после текущей попытки: base_delay * 2^attempt."""
        return self.base_delay * (2**self.attempt)

    @property
    def has_attempts_left(self) -> bool:
        return self.attempt + 1 < self.max_attempts

    def advance(self) -> None:
        self.attempt += 1


async def _backoff_wait(delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
    """Ждёт delay секунд.

    Returns:
        True, если ожидание прервано токеном отмены.
    """
    if cancel_event is None:
        await asyncio.sleep(delay)
        return False

    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return False
    return True


async def _notify(on_progress: Optional[ProgressCallback], failed: int, total: int) -> None:
    if on_progress is None:
        return
    result = on_progress(failed, total)
    if inspect.isawaitable(result):
        await result


async def run_with_retry(
    attempt: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    base_delay: float = 2.0,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[asyncio.Event] = None,
    failure_prefix: str = DEFAULT_FAILURE_PREFIX,
) -> T:
    """Выполняет attempt() с повторами при перегрузке модели.

    Args:
        attempt: Фабрика корутины одного вызова транспорта.
        max_attempts: Всего попыток.
        base_delay: Пауза перед первым повтором, далее удваивается.
        on_progress: Колбэк (неудачных_попыток, max_attempts) перед каждым ожиданием.
            Может быть обычной функцией или корутинной.
        cancel_event: Токен отмены, проверяется во время ожидания.
        failure_prefix: Префикс сообщения GenerationError.

    Returns:
        Результат первой успешной попытки.

    Raises:
        ApiKeyError: Ключ недействителен, без повторов.
        ServiceOverloadedError: Все попытки упали с перегрузкой.
        GenerationError: Прочая ошибка, без повторов.
        OperationCancelledError: Токен отмены сработал во время ожидания.
    """
    state = RetryState(max_attempts=max_attempts, base_delay=base_delay)

    while True:
        try:
            return await attempt()
        except CoachAPIError as e:
            # Уже типизированные ошибки не переупаковываются
            if not e.retryable:
                raise
            classified = ClassifiedError(kind=e.kind, message=e.message, retryable=True)
            error = e
        except Exception as e:
            classified = classify_error(e)
            error = e

        if not classified.retryable:
            logger.warning(
                "Non-retryable error, failing immediately",
                kind=classified.kind.value,
                attempt=state.attempt + 1,
                error_type=type(error).__name__,
            )
            raise error_for(classified, failure_prefix) from error

        if not state.has_attempts_left:
            logger.error(
                "All retry attempts exhausted",
                attempts=state.max_attempts,
                error_type=type(error).__name__,
            )
            raise error_for(classified, failure_prefix) from error

        delay = state.next_delay
        logger.warning(
            "Retry attempt",
            attempt=state.attempt + 1,
            max_attempts=state.max_attempts,
            delay_ms=round(delay * 1000, 1),
            error_type=type(error).__name__,
        )
        await _notify(on_progress, state.attempt + 1, state.max_attempts)

        if await _backoff_wait(delay, cancel_event):
            logger.info("Retry cancelled", attempt=state.attempt + 1)
            raise OperationCancelledError() from error

        state.advance()


__all__ = [
    "AUTH_PATTERNS",
    "OVERLOADED_PATTERNS",
    "RetryState",
    "classify_error",
    "run_with_retry",
]
