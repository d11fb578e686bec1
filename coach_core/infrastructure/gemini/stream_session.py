"""Стриминговые чат-сессии.

Классы:
    FragmentStream
        Однопроходный асинхронный итератор текстовых фрагментов ответа.
    ChatSession
        Чат SDK + собственная append-only история реплик.

Функции:
    stream_error_for
        ClassifiedError -> исключение для сбоя потока.
"""

import asyncio
import uuid
from typing import Any, AsyncIterator, Callable, Optional

from google.genai import types

from coach_core.domain.errors import (
    STREAM_OVERLOADED_MESSAGE,
    ApiKeyError,
    ClassifiedError,
    CoachAPIError,
    ErrorKind,
    GenerationError,
    OperationCancelledError,
    ServiceOverloadedError,
    SessionBusyError,
)
from coach_core.domain.requests import ChatTurn
from coach_core.infrastructure.gemini.request_builder import turn_to_content
from coach_core.infrastructure.gemini.resilience import DEFAULT_FAILURE_PREFIX, classify_error
from coach_core.interfaces.transport import BaseTransport, ChatChannel
from coach_core.utils.logger import CoachLogger, get_logger

logger = get_logger(__name__)

def stream_error_for(
    classified: ClassifiedError,
    failure_prefix: str = DEFAULT_FAILURE_PREFIX,
) -> CoachAPIError:
    """Исключение для сбоя потока. Перегрузка не повторяется и получает короткое сообщение."""
    if classified.kind is ErrorKind.AUTHENTICATION:
        return ApiKeyError()
    if classified.kind is ErrorKind.OVERLOADED:
        return ServiceOverloadedError(STREAM_OVERLOADED_MESSAGE)
    return GenerationError(f"{failure_prefix}: {classified.message}")


class FragmentStream:
    """Фрагменты одного ответа модели.

    Итерируется ровно один раз, пустые фрагменты пропускаются.
    Ошибка посреди потока классифицируется и завершает итерацию;
    уже выданные фрагменты остаются валидными.

    Example:
        >>> stream = await session.send("How many sets for squats?")
        >>> async for fragment in stream:
        ...     print(fragment, end="")
    """

    def __init__(
        self,
        chunks: AsyncIterator[Any],
        *,
        on_complete: Optional[Callable[[str], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
        cancel_event: Optional[asyncio.Event] = None,
        failure_prefix: str = DEFAULT_FAILURE_PREFIX,
        log: Optional[CoachLogger] = None,
    ) -> None:
        self._chunks = chunks
        self._on_complete = on_complete
        self._on_close = on_close
        self._cancel_event = cancel_event
        self._failure_prefix = failure_prefix
        self._log = log or logger
        self._consumed = False
        self._closed = False
        self._iterator: Optional[AsyncIterator[str]] = None

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> AsyncIterator[str]:
        if self._consumed:
            raise RuntimeError("FragmentStream can only be iterated once")
        self._consumed = True
        self._iterator = self._iterate()
        return self._iterator

    async def _iterate(self) -> AsyncIterator[str]:
        collected: list[str] = []
        try:
            async for chunk in self._chunks:
                if self._cancel_event is not None and self._cancel_event.is_set():
                    self._log.info("Stream cancelled", fragments=len(collected))
                    raise OperationCancelledError()

                text = getattr(chunk, "text", None)
                if not text:
                    continue
                collected.append(text)
                yield text
        except CoachAPIError:
            raise
        except Exception as e:
            classified = classify_error(e)
            self._log.error(
                "Stream failed",
                kind=classified.kind.value,
                fragments=len(collected),
                error_type=type(e).__name__,
            )
            raise stream_error_for(classified, self._failure_prefix) from e
        else:
            self._log.debug("Stream completed", fragments=len(collected))
            if self._on_complete is not None:
                self._on_complete("".join(collected))
        finally:
            self._release()

    def _release(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._on_close is not None:
            self._on_close()

    async def aclose(self) -> None:
        """Прекращает чтение досрочно и освобождает сессию."""
        if self._iterator is not None:
            await self._iterator.aclose()
        self._consumed = True
        self._release()

    async def collect(self) -> str:
        """Дочитывает поток и возвращает полный текст."""
        return "".join([fragment async for fragment in self])


class ChatSession:
    """Чат с моделью.

    Один владелец, одна реплика за раз: пока поток предыдущего ответа
    не дочитан, send() выбрасывает SessionBusyError.
    История только дополняется и совпадает с историей чата SDK:
    пара реплик (пользователь, модель) добавляется, когда поток
    дочитан до конца. Сбой, отмена или aclose() историю не меняют.

    Attributes:
        session_id: Короткий идентификатор для логов.
        model: Имя модели.
        failure_prefix: Префикс сообщения GenerationError.
    """

    def __init__(
        self,
        channel: ChatChannel,
        history: Optional[list[ChatTurn]] = None,
        *,
        model: str,
        session_id: Optional[str] = None,
        failure_prefix: str = DEFAULT_FAILURE_PREFIX,
    ) -> None:
        self._channel = channel
        self._history: list[ChatTurn] = list(history or [])
        self._busy = False
        self.model = model
        self.failure_prefix = failure_prefix
        self.session_id = session_id or uuid.uuid4().hex[:8]
        self._log = logger.bind(session_id=self.session_id)

    @classmethod
    async def create(
        cls,
        transport: BaseTransport,
        history: Optional[list[ChatTurn]] = None,
        *,
        model: str,
        config: Optional[types.GenerateContentConfig] = None,
        failure_prefix: str = DEFAULT_FAILURE_PREFIX,
    ) -> "ChatSession":
        """Открывает чат SDK, засеянный историей.

        Raises:
            ValueError: Некорректный base64 в истории.
            ApiKeyError, ServiceOverloadedError, GenerationError: Сбой открытия.
        """
        turns = list(history or [])
        contents = [turn_to_content(turn) for turn in turns]

        try:
            channel = transport.create_chat(model=model, history=contents, config=config)
        except Exception as e:
            raise stream_error_for(classify_error(e), failure_prefix) from e

        session = cls(channel, turns, model=model, failure_prefix=failure_prefix)
        session._log.debug("Chat session opened", model=model, history_turns=len(turns))
        return session

    @property
    def history(self) -> tuple[ChatTurn, ...]:
        return tuple(self._history)

    @property
    def busy(self) -> bool:
        return self._busy

    async def send(
        self,
        message: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> FragmentStream:
        """Отправляет сообщение и возвращает поток ответа.

        Args:
            message: Текст пользователя.
            cancel_event: Токен отмены, проверяется между фрагментами.

        Raises:
            SessionBusyError: Предыдущий поток ещё открыт.
            ApiKeyError, ServiceOverloadedError, GenerationError: Поток не открылся.
        """
        if self._busy:
            raise SessionBusyError("Previous response stream is still open")

        self._busy = True
        self._log.debug("Sending message", message_length=len(message))

        try:
            chunks = await self._channel.send_message_stream(message)
        except Exception as e:
            self._busy = False
            classified = classify_error(e)
            self._log.error(
                "Failed to open stream",
                kind=classified.kind.value,
                error_type=type(e).__name__,
            )
            raise stream_error_for(classified, self.failure_prefix) from e

        return FragmentStream(
            chunks,
            on_complete=lambda text: self._append_exchange(message, text),
            on_close=self._release,
            cancel_event=cancel_event,
            failure_prefix=self.failure_prefix,
            log=self._log,
        )

    def _append_exchange(self, message: str, text: str) -> None:
        self._history.append(ChatTurn.user(message))
        self._history.append(ChatTurn.model(text))

    def _release(self) -> None:
        self._busy = False


__all__ = ["ChatSession", "FragmentStream", "stream_error_for"]
