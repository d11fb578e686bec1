"""Форматтеры и эмодзи-маркеры для логов.

Классы:
    FileFormatter
        Однострочный формат для файла: время | модуль | уровень | сообщение | контекст.
    JSONFormatter
        JSON Lines для агрегаторов логов.

Функции:
    get_module_emoji
        Эмодзи по имени логгера.
"""

import json
import logging
from datetime import datetime
from typing import Any

from .levels import TRACE

# Ищется по сегментам имени логгера, с конца
EMOJI_MAP: dict[str, str] = {
    "gemini": "🧠",
    "transport": "🌐",
    "request_builder": "🧱",
    "response_extractor": "📤",
    "resilience": "🛡️",
    "retry": "🔄",
    "stream_session": "💬",
    "chat": "💬",
    "services": "🏋️",
    "coach_service": "🏋️",
    "operations": "🏋️",
    "config": "⚙️",
    "cli": "🖥️",
    "commands": "🖥️",
}

LEVEL_EMOJI: dict[int, str] = {
    logging.CRITICAL: "💀",
    logging.ERROR: "❌",
    logging.WARNING: "⚠️",
    logging.INFO: "",
    logging.DEBUG: "🔧",
    TRACE: "🔬",
}

FALLBACK_EMOJI: str = "📌"

# Значения этих ключей попадают в префикс [op/session]
CONTEXT_ID_KEYS: tuple[str, ...] = (
    "operation",
    "session_id",
    "request_id",
)

_STANDARD_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)


def get_module_emoji(logger_name: str) -> str:
    """Определяет эмодзи по имени логгера.

    Args:
        logger_name: Полное имя, например coach_core.infrastructure.gemini.transport.

    Returns:
        Эмодзи самого специфичного совпавшего сегмента или FALLBACK_EMOJI.
    """
    for part in reversed(logger_name.lower().split(".")):
        if part in EMOJI_MAP:
            return EMOJI_MAP[part]
    return FALLBACK_EMOJI


def format_extra_context(record: logging.LogRecord) -> dict[str, Any]:
    """Возвращает пользовательский контекст записи без стандартных полей."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_FIELDS
        and key not in CONTEXT_ID_KEYS
        and not key.startswith("_")
    }


class FileFormatter(logging.Formatter):
    """Формат: 2026-01-01 10:00:00 | TRANSPORT | INFO | 🌐 Message | key=value"""

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        module = record.name.split(".")[-1].upper()

        parts = [time_str, module, record.levelname, record.getMessage()]

        extra = format_extra_context(record)
        if extra:
            parts.append(" ".join(f"{k}={v}" for k, v in extra.items()))

        result = " | ".join(parts)
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


class JSONFormatter(logging.Formatter):
    """JSON Lines формат.

    Пример строки:
        {"timestamp": "...", "level": "WARNING", "logger": "coach_core.services",
         "message": "...", "context": {"operation": "video_lookup"},
         "extra": {"error_kind": "overloaded"}}
    """

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {
            key: getattr(record, key)
            for key in CONTEXT_ID_KEYS
            if getattr(record, key, None) is not None
        }
        if context:
            data["context"] = context

        extra = format_extra_context(record)
        if extra:
            data["extra"] = extra

        if record.exc_info:
            data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        return json.dumps(data, ensure_ascii=False, default=str)
