"""Логгер с привязываемым контекстом.

Классы:
    CoachLogger
        Обёртка над logging.Logger: keyword-контекст, bind(), trace_ai().
"""

from __future__ import annotations

import logging
from typing import Any

from .formatters import CONTEXT_ID_KEYS, LEVEL_EMOJI, get_module_emoji
from .levels import TRACE


class CoachLogger:
    """Структурированный логгер.

    Контекст передаётся именованными аргументами и уходит в extra записи,
    поэтому файловый и JSON-форматтеры видят его как отдельные поля.

    Example:
        >>> logger = CoachLogger("coach_core.services.coach_service")
        >>> log = logger.bind(operation="workout_plan")
        >>> log.info("Plan generated", days=4)
        # 🏋️ [workout_plan] Plan generated
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None) -> None:
        self.name = name
        self._logger = logging.getLogger(name)
        self._context: dict[str, Any] = context or {}

    def bind(self, **context: Any) -> CoachLogger:
        """Новый логгер с объединённым контекстом.

        Example:
            >>> chat_log = logger.bind(session_id="a1b2")
            >>> chat_log.debug("Fragment received", size=12)
        """
        return CoachLogger(self.name, {**self._context, **context})

    def _log(self, level: int, msg: str, **context: Any) -> None:
        extra = {**self._context, **context}

        # RichHandler не вызывает наш форматтер, поэтому префикс и эмодзи
        # вставляются прямо в сообщение
        context_ids = [str(extra[key]) for key in CONTEXT_ID_KEYS if extra.get(key)]
        context_prefix = f"[{'/'.join(context_ids)}] " if context_ids else ""
        emoji = LEVEL_EMOJI.get(level, "") or get_module_emoji(self.name)

        self._logger.log(level, f"{emoji} {context_prefix}{msg}", extra=extra)

    def trace(self, msg: str, **context: Any) -> None:
        self._log(TRACE, msg, **context)

    def debug(self, msg: str, **context: Any) -> None:
        self._log(logging.DEBUG, msg, **context)

    def info(self, msg: str, **context: Any) -> None:
        self._log(logging.INFO, msg, **context)

    def warning(self, msg: str, **context: Any) -> None:
        self._log(logging.WARNING, msg, **context)

    def error(self, msg: str, **context: Any) -> None:
        self._log(logging.ERROR, msg, **context)

    def trace_ai(
        self,
        prompt: str,
        response: str | None = None,
        *,
        model: str | None = None,
        tokens_in: int | None = None,
        tokens_out: int | None = None,
        duration_ms: float | None = None,
        **metadata: Any,
    ) -> None:
        """Трассировка вызова модели на уровне TRACE.

        Промпт и ответ обрезаются до 300 символов.

        Args:
            prompt: Отправленный промпт (или его описание для мультимодальных запросов).
            response: Текст ответа, None при ошибке.
            model: Имя модели.
            tokens_in: Входные токены.
            tokens_out: Выходные токены.
            duration_ms: Длительность вызова.
            **metadata: Прочие поля (operation, attempt, ...).
        """
        if not self._logger.isEnabledFor(TRACE):
            return

        ai_context: dict[str, Any] = {"ai_prompt": _truncate(prompt), **metadata}
        if response is not None:
            ai_context["ai_response"] = _truncate(response)

        msg_parts = ["AI call"]
        if model:
            msg_parts.append(f"model={model}")
        if tokens_in is not None or tokens_out is not None:
            msg_parts.append(f"tokens={tokens_in or '?'}/{tokens_out or '?'}")
        if duration_ms is not None:
            msg_parts.append(f"time={duration_ms:.0f}ms")

        self.trace(" ".join(msg_parts), **ai_context)

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)


def _truncate(text: str, limit: int = 300) -> str:
    return text[:limit] + "..." if len(text) > limit else text
