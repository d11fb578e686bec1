"""Логирование Coach Core.

Функции:
    get_logger(name: str) -> CoachLogger
        Логгер для модуля (ленивая настройка с дефолтами).
    setup_logging(config: LoggingConfig | None = None) -> None
        Настроить хендлеры корневого логгера coach_core.

Классы:
    CoachLogger
        Логгер с keyword-контекстом и bind().
    LoggingConfig
        Настройки логирования из COACH_LOG_* переменных.

Example:
    >>> from coach_core.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Workout plan generated", days=5)
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggingConfig
from .filters import SensitiveDataFilter
from .formatters import FileFormatter, JSONFormatter
from .levels import TRACE, install_trace_level
from .logger import CoachLogger

install_trace_level()

_logging_configured: bool = False

ROOT_LOGGER_NAME: str = "coach_core"


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Настраивает корневой логгер coach_core.

    Консоль: RichHandler в stderr. Файл (опционально): FileFormatter или JSONFormatter.
    Повторный вызов заменяет хендлеры.

    Args:
        config: Настройки. None = LoggingConfig() из окружения.
    """
    global _logging_configured

    config = config or LoggingConfig()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(TRACE)

    sensitive_filter = SensitiveDataFilter() if config.redact_secrets else None

    # markup=False: префиксы вида [workout_plan] не должны читаться как rich-стили
    console_handler = RichHandler(
        console=Console(stderr=True),
        level=logging.getLevelName(config.level),
        show_time=True,
        show_level=False,
        show_path=config.show_path,
        rich_tracebacks=True,
        markup=False,
    )
    if sensitive_filter:
        console_handler.addFilter(sensitive_filter)
    root_logger.addHandler(console_handler)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.getLevelName(config.file_level))
        file_handler.setFormatter(JSONFormatter() if config.json_format else FileFormatter())
        if sensitive_filter:
            file_handler.addFilter(sensitive_filter)
        root_logger.addHandler(file_handler)

    root_logger.propagate = False
    _logging_configured = True


def get_logger(name: str) -> CoachLogger:
    """Логгер для модуля.

    Args:
        name: Обычно __name__.

    Returns:
        CoachLogger; при первом вызове логирование настраивается с дефолтами.
    """
    if not _logging_configured:
        setup_logging()
    return CoachLogger(name)


__all__ = [
    "TRACE",
    "get_logger",
    "setup_logging",
    "CoachLogger",
    "LoggingConfig",
    "FileFormatter",
    "JSONFormatter",
    "SensitiveDataFilter",
]
