"""Настройки логирования.

Классы:
    LoggingConfig
        Pydantic Settings модель, читает переменные COACH_LOG_*.

Environment Variables:
    COACH_LOG_LEVEL: Уровень консоли (TRACE/DEBUG/INFO/WARNING/ERROR).
    COACH_LOG_FILE: Путь к файлу логов.
    COACH_LOG_JSON: JSON-формат для файла (true/false).
    COACH_LOG_REDACT: Маскировать API-ключи (true/false).
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseSettings):
    """Конфигурация логирования.

    Приоритет: явный аргумент > переменная окружения > default.

    Attributes:
        level: Минимальный уровень для консоли.
        file_level: Минимальный уровень для файла.
        log_file: Путь к файлу логов (None = только консоль).
        json_format: Писать файл в JSON Lines.
        show_path: Показывать модуль:строку в консоли.
        redact_secrets: Маскировать API-ключи.

    Example:
        >>> config = LoggingConfig(level="DEBUG", log_file="/tmp/coach.log")
    """

    level: LogLevel = Field(
        default="INFO",
        description="Минимальный уровень для консольного вывода",
    )

    file_level: LogLevel = Field(
        default="DEBUG",
        description="Минимальный уровень для файлового вывода",
    )

    log_file: Path | None = Field(
        default=None,
        validation_alias="COACH_LOG_FILE",
        description="Путь к файлу логов (None = только консоль)",
    )

    json_format: bool = Field(
        default=False,
        validation_alias="COACH_LOG_JSON",
        description="JSON-формат для файла",
    )

    show_path: bool = Field(
        default=False,
        description="Показывать путь к модулю в консоли",
    )

    redact_secrets: bool = Field(
        default=True,
        validation_alias="COACH_LOG_REDACT",
        description="Маскировать API-ключи в логах",
    )

    model_config = SettingsConfigDict(
        env_prefix="COACH_LOG_",
        env_file=None,
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )
