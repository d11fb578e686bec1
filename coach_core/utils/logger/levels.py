"""Уровень TRACE для дампов промптов и ответов модели.

Функции:
    install_trace_level()
        Регистрирует TRACE (5) в модуле logging.

Константы:
    TRACE: int
        Значение уровня TRACE, ниже DEBUG.
"""

import logging
from typing import Any

TRACE: int = 5

_trace_installed: bool = False


def _trace_method(
    self: logging.Logger, message: str, *args: Any, **kwargs: Any
) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


def install_trace_level() -> None:
    """Регистрирует уровень TRACE и метод Logger.trace().

    Повторные вызовы ничего не делают.
    """
    global _trace_installed

    if _trace_installed:
        return

    logging.addLevelName(TRACE, "TRACE")
    logging.TRACE = TRACE  # type: ignore[attr-defined]
    logging.Logger.trace = _trace_method  # type: ignore[attr-defined]

    _trace_installed = True


install_trace_level()
