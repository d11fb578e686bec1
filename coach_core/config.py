"""Единая конфигурация Coach Core.

Загружает настройки из (в порядке приоритета):
1. Аргументы конструктора / CLI (kwargs)
2. Environment variables (COACH_*, GEMINI_API_KEY, API_KEY)
3. .env в текущей директории
4. coach.toml в текущей или родительских директориях
5. Default values

Классы:
    CoachConfig
        Pydantic Settings с поддержкой TOML и env variables.

Функции:
    get_config
        Получить конфигурацию с возможными override'ами.
    reset_config
        Сбросить кэшированный экземпляр.
    find_config_file
        Найти coach.toml в текущей или родительских директориях.

Example:
    >>> from coach_core.config import get_config
    >>> config = get_config(log_level="DEBUG")
    >>> config.full_model
    'gemini-2.5-flash'
"""

import os
import tomllib
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coach_core.utils.logger import get_logger

logger = get_logger(__name__)


LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONFIG_FILE_NAME = "coach.toml"


def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Найти coach.toml в текущей или родительских директориях.

    Args:
        start_dir: Начальная директория поиска (по умолчанию cwd).

    Returns:
        Path к coach.toml или None если не найден.
    """
    current = start_dir or Path.cwd()

    # Не выше 10 уровней
    for _ in range(10):
        config_path = current / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


class CoachConfig(BaseSettings):
    """Конфигурация клиента Gemini.

    Экземпляр неизменяем после создания.

    Attributes:
        gemini_api_key: API ключ Gemini.
        full_model: Основная модель (планы, анализ, чат).
        lite_model: Облегчённая модель для best-effort операций.
        image_model: Модель для редактирования изображений.
        temperature: Температура генерации.
        max_output_tokens: Лимит токенов ответа.
        max_attempts: Всего попыток на вызов (1 + повторы).
        retry_base_delay: Пауза перед первым повтором, далее удваивается.
        assistant_name: Имя персоны чат-ассистента.
        log_level: Уровень логирования консоли.
        log_file: Путь к файлу логов.

    Environment Variables:
        GEMINI_API_KEY или API_KEY: API ключ (без префикса COACH_).
        COACH_FULL_MODEL, COACH_LITE_MODEL, COACH_IMAGE_MODEL: Модели.
        COACH_MAX_ATTEMPTS, COACH_RETRY_BASE_DELAY: Повторы.
        COACH_LOG_LEVEL, COACH_LOG_FILE: Логирование.
    """

    # === Gemini API ===
    gemini_api_key: Optional[str] = Field(
        default=None,
        description="API ключ для Google Gemini",
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "gemini_api_key"),
    )

    full_model: str = Field(
        default="gemini-2.5-flash",
        description="Модель для основных операций",
    )

    lite_model: str = Field(
        default="gemini-flash-lite-latest",
        description="Модель для быстрых ответов и поиска видео",
    )

    image_model: str = Field(
        default="gemini-2.5-flash-image",
        description="Модель для редактирования изображений",
    )

    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Температура генерации",
    )

    max_output_tokens: int = Field(
        default=8192,
        ge=256,
        le=65_536,
        description="Максимальное количество токенов в ответе",
    )

    # === Retry ===
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Всего попыток на один вызов",
    )

    retry_base_delay: float = Field(
        default=2.0,
        ge=0.0,
        description="Пауза перед первым повтором в секундах",
    )

    # === Chat ===
    assistant_name: str = Field(
        default="Reddy",
        description="Имя персоны фитнес-ассистента",
    )

    # === Logging ===
    log_level: LogLevel = Field(
        default="INFO",
        description="Уровень логирования",
    )

    log_file: Optional[Path] = Field(
        default=None,
        description="Путь к файлу логов (None = только консоль)",
    )

    # === Validators ===
    @field_validator("log_file", mode="before")
    @classmethod
    def validate_log_file(cls, v: Any) -> Optional[Path]:
        if v is None or v == "":
            return None
        return Path(v).expanduser()

    @field_validator("gemini_api_key", mode="before")
    @classmethod
    def strip_whitespace(cls, v: Any) -> Optional[str]:
        """Убирает пробелы из ключа."""
        if v is None or v == "":
            return None
        return str(v).strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def log_config_source(self) -> "CoachConfig":
        logger.debug(
            "Config loaded",
            full_model=self.full_model,
            lite_model=self.lite_model,
            max_attempts=self.max_attempts,
            has_api_key=self.gemini_api_key is not None,
        )
        return self

    model_config = SettingsConfigDict(
        env_prefix="COACH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    def __init__(self, **data: Any):
        """Инициализация с поддержкой coach.toml.

        Значения из TOML имеют низший приоритет: env и kwargs их переопределяют.
        """
        toml_path = find_config_file()
        toml_data: dict = {}

        if toml_path:
            toml_data = self._load_toml(toml_path)
            logger.debug("Loaded config from TOML", path=str(toml_path))

        # Ключи из TOML, уже заданные в окружении, не передаём как kwargs,
        # иначе они перебьют env
        toml_data = {k: v for k, v in toml_data.items() if not _env_overrides(k)}

        merged = {**toml_data, **data}
        super().__init__(**merged)

    @staticmethod
    def _load_toml(path: Path) -> dict:
        """Загружает и выравнивает coach.toml.

        Секции:
        [gemini]
        api_key = "..."
        full_model = "gemini-2.5-flash"

        [retry]
        max_attempts = 3

        превращаются в плоские поля конфига.
        """
        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Failed to load TOML", path=str(path), error=str(e))
            return {}

        mapping = {
            ("gemini", "api_key"): "gemini_api_key",
            ("gemini", "full_model"): "full_model",
            ("gemini", "lite_model"): "lite_model",
            ("gemini", "image_model"): "image_model",
            ("gemini", "temperature"): "temperature",
            ("gemini", "max_output_tokens"): "max_output_tokens",
            ("gemini", "assistant_name"): "assistant_name",
            ("retry", "max_attempts"): "max_attempts",
            ("retry", "base_delay"): "retry_base_delay",
            ("logging", "level"): "log_level",
            ("logging", "file"): "log_file",
        }

        flat: dict = {}

        for (section, key), field_name in mapping.items():
            if section in raw and key in raw[section]:
                flat[field_name] = raw[section][key]

        # Плоские ключи тоже поддерживаются
        for field_name in set(mapping.values()):
            if field_name in raw:
                flat[field_name] = raw[field_name]

        return flat

    # === Utility Methods ===

    def require_api_key(self) -> str:
        """Получить API ключ или выбросить исключение.

        Raises:
            ValueError: Если ключ не настроен.
        """
        if not self.gemini_api_key:
            raise ValueError(
                "GEMINI_API_KEY not configured. "
                "Set it via environment variable or in coach.toml"
            )
        return self.gemini_api_key


def _env_overrides(field_name: str) -> bool:
    if field_name == "gemini_api_key":
        names = ("GEMINI_API_KEY", "API_KEY")
    else:
        names = (f"COACH_{field_name.upper()}",)
    return any(os.environ.get(name) for name in names)


_config: Optional[CoachConfig] = None


def get_config(**overrides: Any) -> CoachConfig:
    """Получить конфигурацию с возможными override'ами.

    При первом вызове создаёт конфигурацию.
    Если переданы overrides, всегда создаёт новый экземпляр.

    Example:
        >>> config = get_config()
        >>> config = get_config(max_attempts=5)
    """
    global _config

    if overrides or _config is None:
        _config = CoachConfig(**overrides)

    return _config


def reset_config() -> None:
    """Сбросить глобальный конфиг (для тестов)."""
    global _config
    _config = None


__all__ = [
    "CoachConfig",
    "get_config",
    "reset_config",
    "find_config_file",
    "LogLevel",
]
