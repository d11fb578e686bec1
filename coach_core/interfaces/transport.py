"""Интерфейс транспорта к Gemini API.

Классы:
    GeminiPayload
        Готовый к отправке запрос: модель, содержимое, конфиг генерации.
    ChatChannel
        Протокол SDK-чата со стриминговой отправкой.
    BaseTransport
        Абстрактный транспорт: одиночная генерация и чат-каналы.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional, Protocol

from google.genai import types


@dataclass(frozen=True)
class GeminiPayload:
    """Запрос к generate_content.

    Attributes:
        model: Имя модели.
        contents: Содержимое запроса (одна user-реплика).
        config: Конфиг генерации (схема, инструменты, safety, модальности).
    """

    model: str
    contents: list[types.Content]
    config: types.GenerateContentConfig


class ChatChannel(Protocol):
    """Открытый чат SDK. Историю хранит сам канал."""

    async def send_message_stream(self, message: Any) -> AsyncIterator[Any]:
        """Отправляет сообщение, возвращает асинхронный итератор чанков с .text."""
        ...


class BaseTransport(ABC):
    """Абстрактный транспорт.

    Реализация не повторяет запросы и не классифицирует ошибки:
    этим занимаются resilience и сервис.

    Example:
        >>> class FakeTransport(BaseTransport):
        ...     async def generate(self, payload):
        ...         return types.GenerateContentResponse(...)
        ...
        ...     def create_chat(self, model, history, config=None):
        ...         return FakeChannel()
    """

    @abstractmethod
    async def generate(self, payload: GeminiPayload) -> types.GenerateContentResponse:
        """Выполняет один вызов generate_content.

        Raises:
            Exception: Любая ошибка SDK пробрасывается как есть.
        """
        pass

    @abstractmethod
    def create_chat(
        self,
        model: str,
        history: list[types.Content],
        config: Optional[types.GenerateContentConfig] = None,
    ) -> ChatChannel:
        """Открывает чат, засеянный историей."""
        pass


__all__ = ["GeminiPayload", "ChatChannel", "BaseTransport"]
