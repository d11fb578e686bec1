"""CLI Context - контейнер зависимостей для команд.

Компоненты создаются лениво, чтобы --help работал без ключа API.

Classes:
    CLIContext: Настройки глобальных опций + ленивый CoachService.
"""

import asyncio
import json
from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, Coroutine, Optional, TypeVar

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from coach_core.cli.console import console as default_console
from coach_core.config import CoachConfig, get_config
from coach_core.domain.errors import CoachAPIError
from coach_core.services import CoachService

T = TypeVar("T")


@dataclass
class CLIContext:
    """Контейнер зависимостей для CLI команд.

    Attributes:
        log_level: Override уровня логирования из CLI.
        json_output: Режим JSON вывода (для скриптов).
        verbose: Подробный вывод.
        console: Rich Console для вывода.

    Example:
        >>> ctx = CLIContext(log_level="DEBUG")
        >>> service = ctx.get_service()
    """

    log_level: Optional[str] = None
    json_output: bool = False
    verbose: bool = False
    console: Console = field(default_factory=lambda: default_console)

    _config: Optional[CoachConfig] = field(default=None, init=False, repr=False)
    _service: Optional[CoachService] = field(default=None, init=False, repr=False)
    _logging_configured: bool = field(default=False, init=False, repr=False)

    def get_config(self) -> CoachConfig:
        if self._config is None:
            overrides = {}
            if self.log_level:
                overrides["log_level"] = self.log_level
            self._config = get_config(**overrides)
        return self._config

    def get_service(self) -> CoachService:
        """Получить или создать CoachService.

        Raises:
            ValueError: Если GEMINI_API_KEY не настроен.
        """
        if self._service is None:
            config = self.get_config()
            self._ensure_logging(config)
            self._service = self._build_service(config)
        return self._service

    def require_service(self) -> CoachService:
        """CoachService или понятная ошибка и выход с кодом 1."""
        try:
            return self.get_service()
        except ValueError as e:
            self.print_error(str(e))
            raise typer.Exit(1)

    def run(self, coroutine: Coroutine[Any, Any, T]) -> T:
        """Выполняет операцию сервиса, ошибки клиента превращает в exit code 1."""
        try:
            return asyncio.run(coroutine)
        except (CoachAPIError, ValueError) as e:
            self.print_error(str(e))
            raise typer.Exit(1)

    def _ensure_logging(self, config: CoachConfig) -> None:
        if self._logging_configured:
            return

        from coach_core.utils.logger import LoggingConfig, setup_logging

        # --verbose опускает порог до INFO
        level = config.log_level
        if self.verbose and level in ("WARNING", "ERROR", "CRITICAL"):
            level = "INFO"

        setup_logging(LoggingConfig(level=level, log_file=config.log_file))
        self._logging_configured = True

    def _build_service(self, config: CoachConfig) -> CoachService:
        return CoachService.from_config(config)

    def on_retry(self, failed_attempts: int, max_attempts: int) -> None:
        """Колбэк прогресса повторов для долгих операций."""
        if not self.json_output:
            self.console.print(
                f"[yellow]⏳ Model is busy, retrying ({failed_attempts}/{max_attempts})...[/yellow]"
            )

    def print_json(self, data: Any) -> None:
        self.console.print_json(json.dumps(_to_jsonable(data), ensure_ascii=False, default=str))

    def print_error(self, message: str) -> None:
        if self.json_output:
            self.print_json({"error": message})
        else:
            self.console.print(Panel(Text(message, style="red"), title="❌ Ошибка"))


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump()
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, (list, tuple)):
        return [_to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _to_jsonable(value) for key, value in data.items()}
    return data


__all__ = ["CLIContext"]
