"""Инфраструктура Google Gemini.

Модули:
    resilience
        Классификация ошибок и повторы с exponential backoff.
    request_builder
        OperationRequest -> GeminiPayload.
    response_extractor
        Ответ SDK -> типизированный результат.
    stream_session
        Стриминговые чат-сессии.
    transport
        GeminiTransport на genai.Client(...).aio.
    prompts
        Промпты операций.
"""

from coach_core.infrastructure.gemini.request_builder import build_chat_config, build_payload
from coach_core.infrastructure.gemini.resilience import RetryState, classify_error, run_with_retry
from coach_core.infrastructure.gemini.response_extractor import extract_result
from coach_core.infrastructure.gemini.stream_session import ChatSession, FragmentStream
from coach_core.infrastructure.gemini.transport import GeminiTransport

__all__ = [
    "ChatSession",
    "FragmentStream",
    "GeminiTransport",
    "RetryState",
    "build_chat_config",
    "build_payload",
    "classify_error",
    "extract_result",
    "run_with_retry",
]
