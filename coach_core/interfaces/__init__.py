"""Интерфейсы (контракты) для компонентов системы.

Классы:
    BaseTransport
        Абстрактный транспорт к Gemini API.
    ChatChannel
        Протокол стримингового чата.
    GeminiPayload
        Готовый к отправке запрос.
"""

from coach_core.interfaces.transport import BaseTransport, ChatChannel, GeminiPayload

__all__ = [
    "BaseTransport",
    "ChatChannel",
    "GeminiPayload",
]
