"""Фильтр секретов для логов.

Классы:
    SensitiveDataFilter
        Маскирует API-ключи Gemini и bearer-токены в сообщениях.
"""

import logging
import re
from typing import Pattern

SENSITIVE_PATTERNS: list[Pattern[str]] = [
    re.compile(r"AIza[0-9A-Za-z_-]{35}"),  # Google API Key
    re.compile(r"(?i)bearer\s+[a-zA-Z0-9_.-]{20,}"),
    re.compile(r"(?i)(key=)[0-9A-Za-z_-]{20,}"),  # ?key=... в URL запросов
]

REDACTED: str = "***REDACTED***"


class SensitiveDataFilter(logging.Filter):
    """Заменяет найденные секреты на ***REDACTED***.

    Обрабатывает record.msg и record.args, включая вложенные
    dict/list/tuple. Запись никогда не отбрасывается.

    Attributes:
        patterns: Скомпилированные regex-паттерны.
        redacted: Строка замены.
    """

    def __init__(
        self,
        patterns: list[Pattern[str]] | None = None,
        redacted: str = REDACTED,
        name: str = "",
    ) -> None:
        super().__init__(name)
        self.patterns = patterns or SENSITIVE_PATTERNS
        self.redacted = redacted

    def _redact_string(self, text: str) -> str:
        result = text
        for pattern in self.patterns:
            if pattern.groups:
                result = pattern.sub(lambda m: m.group(1) + self.redacted, result)
            else:
                result = pattern.sub(self.redacted, result)
        return result

    def _redact_value(self, value: object) -> object:
        if isinstance(value, str):
            return self._redact_string(value)
        if isinstance(value, dict):
            return {k: self._redact_value(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(self._redact_value(item) for item in value)
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._redact_string(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._redact_value(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(self._redact_value(arg) for arg in record.args)

        # Контекст из extra лежит прямо в __dict__ записи
        for key in ("error", "error_preview", "ai_prompt", "ai_response"):
            value = getattr(record, key, None)
            if isinstance(value, str):
                setattr(record, key, self._redact_string(value))

        return True
