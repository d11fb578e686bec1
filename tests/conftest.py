"""
Конфигурация pytest для тестов Coach Core.

Определяет фикстуры для:
- Изоляции от окружения разработчика (env, coach.toml, .env)
- Отключения пауз между повторами
"""

import os
from unittest.mock import AsyncMock, patch

import pytest

from coach_core.config import CoachConfig, reset_config


# ============================================================================
# Фикстуры
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Каждый тест в пустой директории без GEMINI_*/COACH_* переменных."""
    for name in list(os.environ):
        if name.startswith("COACH_") or name in ("GEMINI_API_KEY", "API_KEY"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config() -> CoachConfig:
    return CoachConfig(gemini_api_key="test-key")


@pytest.fixture
def no_backoff():
    """Паузы между повторами не ждут, мок хранит запрошенные задержки."""
    with patch(
        "coach_core.infrastructure.gemini.resilience._backoff_wait",
        new=AsyncMock(return_value=False),
    ) as mock_wait:
        yield mock_wait
