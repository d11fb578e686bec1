"""Тесты для модуля конфигурации CoachConfig.

Проверяет:
- Значения по умолчанию
- Загрузку из environment variables
- Загрузку из coach.toml
- Приоритет источников
- Валидацию значений
"""

import pytest
from pydantic import ValidationError

from coach_core.config import (
    CoachConfig,
    find_config_file,
    get_config,
    reset_config,
)


TOML_CONTENT = """
[gemini]
api_key = "toml-key"
full_model = "gemini-2.5-pro"
lite_model = "toml-lite"
assistant_name = "Coach"

[retry]
max_attempts = 5
base_delay = 0.5

[logging]
level = "DEBUG"
"""


class TestDefaults:
    """Тесты значений по умолчанию."""

    def test_models(self):
        config = CoachConfig()

        assert config.full_model == "gemini-2.5-flash"
        assert config.lite_model == "gemini-flash-lite-latest"
        assert config.image_model == "gemini-2.5-flash-image"

    def test_retry(self):
        config = CoachConfig()

        assert config.max_attempts == 3
        assert config.retry_base_delay == 2.0

    def test_misc(self):
        config = CoachConfig()

        assert config.gemini_api_key is None
        assert config.assistant_name == "Reddy"
        assert config.log_level == "INFO"
        assert config.log_file is None


class TestEnvironment:
    """Тесты загрузки из переменных окружения."""

    def test_gemini_api_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "  env-key  ")
        assert CoachConfig().gemini_api_key == "env-key"

    def test_api_key_alias(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "short-key")
        assert CoachConfig().gemini_api_key == "short-key"

    def test_prefixed_fields(self, monkeypatch):
        monkeypatch.setenv("COACH_FULL_MODEL", "gemini-2.5-pro")
        monkeypatch.setenv("COACH_MAX_ATTEMPTS", "4")
        monkeypatch.setenv("COACH_LOG_LEVEL", "debug")

        config = CoachConfig()

        assert config.full_model == "gemini-2.5-pro"
        assert config.max_attempts == 4
        assert config.log_level == "DEBUG"

    def test_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text("GEMINI_API_KEY=dotenv-key\n")
        assert CoachConfig().gemini_api_key == "dotenv-key"


class TestToml:
    """Тесты загрузки из coach.toml."""

    def test_sections(self, tmp_path):
        (tmp_path / "coach.toml").write_text(TOML_CONTENT)

        config = CoachConfig()

        assert config.gemini_api_key == "toml-key"
        assert config.full_model == "gemini-2.5-pro"
        assert config.lite_model == "toml-lite"
        assert config.assistant_name == "Coach"
        assert config.max_attempts == 5
        assert config.retry_base_delay == 0.5
        assert config.log_level == "DEBUG"

    def test_flat_keys(self, tmp_path):
        (tmp_path / "coach.toml").write_text('image_model = "img-x"\n')
        assert CoachConfig().image_model == "img-x"

    def test_found_in_parent(self, tmp_path, monkeypatch):
        (tmp_path / "coach.toml").write_text(TOML_CONTENT)
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert find_config_file() == tmp_path / "coach.toml"
        assert CoachConfig().full_model == "gemini-2.5-pro"

    def test_broken_toml_ignored(self, tmp_path):
        (tmp_path / "coach.toml").write_text("[gemini\nbroken")
        assert CoachConfig().full_model == "gemini-2.5-flash"

    def test_env_beats_toml(self, tmp_path, monkeypatch):
        (tmp_path / "coach.toml").write_text(TOML_CONTENT)
        monkeypatch.setenv("COACH_MAX_ATTEMPTS", "2")
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        config = CoachConfig()

        assert config.max_attempts == 2
        assert config.gemini_api_key == "env-key"

    def test_kwargs_beat_toml(self, tmp_path):
        (tmp_path / "coach.toml").write_text(TOML_CONTENT)
        assert CoachConfig(max_attempts=1).max_attempts == 1


class TestValidation:
    """Тесты валидации."""

    def test_frozen(self):
        config = CoachConfig()
        with pytest.raises(ValidationError):
            config.max_attempts = 10

    @pytest.mark.parametrize(
        "field,value",
        [("max_attempts", 0), ("temperature", 3.0), ("retry_base_delay", -1.0)],
    )
    def test_bounds(self, field, value):
        with pytest.raises(ValidationError):
            CoachConfig(**{field: value})

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            CoachConfig(log_level="LOUD")

    def test_log_file_path(self, tmp_path):
        config = CoachConfig(log_file=str(tmp_path / "coach.log"))
        assert config.log_file == tmp_path / "coach.log"

    def test_require_api_key(self):
        assert CoachConfig(gemini_api_key="k").require_api_key() == "k"

        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            CoachConfig().require_api_key()


class TestGlobalConfig:
    def test_cached(self):
        assert get_config() is get_config()

    def test_overrides_create_new(self):
        first = get_config()
        second = get_config(max_attempts=7)

        assert second is not first
        assert second.max_attempts == 7

    def test_reset(self):
        first = get_config()
        reset_config()
        assert get_config() is not first
