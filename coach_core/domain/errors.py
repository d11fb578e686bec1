"""Классификация ошибок и исключения клиента.

Классы:
    ErrorKind
        Виды ошибок: auth, overloaded, safety, not_found, malformed, generic.
    ClassifiedError
        Результат классификации сбоя транспорта.
    CoachAPIError
        Базовое исключение; у каждого наследника фиксирован kind.
    SessionBusyError
        Нарушение контракта чат-сессии вызывающей стороной.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Виды ошибок.

    Attributes:
        AUTHENTICATION: Неверный или отсутствующий API-ключ.
        OVERLOADED: Модель перегружена (503), имеет смысл повторить.
        SAFETY_BLOCKED: Ответ заблокирован фильтрами безопасности.
        NOT_FOUND: Ничего не найдено (только для lookup-операций, не ошибка).
        MALFORMED_OUTPUT: JSON ответа не парсится или не совпадает со схемой.
        GENERIC: Всё остальное.
    """

    AUTHENTICATION = "authentication"
    OVERLOADED = "overloaded"
    SAFETY_BLOCKED = "safety_blocked"
    NOT_FOUND = "not_found"
    MALFORMED_OUTPUT = "malformed_output"
    GENERIC = "generic"


@dataclass(frozen=True)
class ClassifiedError:
    """Классифицированный сбой вызова.

    Attributes:
        kind: Вид ошибки.
        message: Исходное сообщение транспорта.
        retryable: Можно ли повторить попытку.
    """

    kind: ErrorKind
    message: str
    retryable: bool


OVERLOADED_MESSAGE = (
    "The AI model is currently overloaded. We tried several times without success. "
    "Please try again in a few moments."
)
STREAM_OVERLOADED_MESSAGE = (
    "The AI model is currently overloaded. Please try again in a few moments."
)
API_KEY_MESSAGE = "The Gemini API key is invalid or missing. Please check your configuration."
SAFETY_MESSAGE = (
    "The question could not be answered due to safety filters. "
    "Please try rephrasing your question."
)
NO_IMAGE_MESSAGE = "The AI did not return an edited image."


class CoachAPIError(Exception):
    """Базовое исключение для всех сбоев операций клиента.

    Attributes:
        kind: Вид ошибки (задаётся классом).
        retryable: Повторяемость (задаётся классом).
        message: Сообщение для пользователя.
    """

    kind: ErrorKind = ErrorKind.GENERIC
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ApiKeyError(CoachAPIError):
    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = API_KEY_MESSAGE) -> None:
        super().__init__(message)


class ServiceOverloadedError(CoachAPIError):
    """Модель перегружена и бюджет попыток исчерпан."""

    kind = ErrorKind.OVERLOADED
    retryable = True

    def __init__(self, message: str = OVERLOADED_MESSAGE) -> None:
        super().__init__(message)


class SafetyBlockedError(CoachAPIError):
    kind = ErrorKind.SAFETY_BLOCKED

    def __init__(self, message: str = SAFETY_MESSAGE) -> None:
        super().__init__(message)


class MalformedOutputError(CoachAPIError):
    """Структурированный ответ не прошёл разбор или валидацию схемы.

    Attributes:
        raw_text: Сырой текст ответа (может содержать персональные данные, не логировать целиком).
    """

    kind = ErrorKind.MALFORMED_OUTPUT

    def __init__(self, message: str, raw_text: str | None = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class GenerationError(CoachAPIError):
    kind = ErrorKind.GENERIC


class NoImageReturnedError(GenerationError):
    def __init__(self, message: str = NO_IMAGE_MESSAGE) -> None:
        super().__init__(message)


class OperationCancelledError(CoachAPIError):
    """Операция прервана токеном отмены во время ожидания."""

    def __init__(self, message: str = "Operation was cancelled by the caller.") -> None:
        super().__init__(message)


class SessionBusyError(RuntimeError):
    """send() вызван до того, как предыдущий поток ответа был дочитан."""


def error_for(classified: ClassifiedError, failure_prefix: str) -> CoachAPIError:
    """Переводит ClassifiedError в исключение для вызывающего кода.

    Args:
        classified: Результат classify_error().
        failure_prefix: Префикс сообщения для GENERIC, зависит от операции.

    Returns:
        Исключение соответствующего класса (не выбрасывается).
    """
    if classified.kind is ErrorKind.AUTHENTICATION:
        return ApiKeyError()
    if classified.kind is ErrorKind.OVERLOADED:
        return ServiceOverloadedError()
    return GenerationError(f"{failure_prefix}: {classified.message}")
