"""Тесты для модуля логирования coach_core.utils.logger.

Покрытие:
- levels.py: регистрация TRACE
- config.py: LoggingConfig
- filters.py: SensitiveDataFilter маскирование ключей
- formatters.py: эмодзи, FileFormatter, JSONFormatter
- logger.py: CoachLogger, bind(), trace_ai()
"""

import json
import logging

import pytest

from coach_core.utils.logger import (
    TRACE,
    CoachLogger,
    LoggingConfig,
    get_logger,
    setup_logging,
)
from coach_core.utils.logger.filters import REDACTED, SensitiveDataFilter
from coach_core.utils.logger.formatters import (
    FALLBACK_EMOJI,
    FileFormatter,
    JSONFormatter,
    get_module_emoji,
)

FAKE_KEY = "AIza" + "A" * 35


def _record(msg: str = "Hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="coach_core.infrastructure.gemini.transport",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLevels:
    def test_trace_registered(self):
        assert TRACE == 5
        assert logging.getLevelName(TRACE) == "TRACE"
        assert hasattr(logging.Logger, "trace")


class TestLoggingConfig:
    def test_defaults(self):
        config = LoggingConfig()

        assert config.level == "INFO"
        assert config.log_file is None
        assert config.redact_secrets is True

    def test_field_names(self, tmp_path):
        config = LoggingConfig(log_file=tmp_path / "x.log", json_format=True)

        assert config.log_file == tmp_path / "x.log"
        assert config.json_format is True

    def test_env_level(self, monkeypatch):
        monkeypatch.setenv("COACH_LOG_LEVEL", "DEBUG")
        assert LoggingConfig().level == "DEBUG"

    def test_env_file_json_redact(self, monkeypatch, tmp_path):
        monkeypatch.setenv("COACH_LOG_FILE", str(tmp_path / "env.log"))
        monkeypatch.setenv("COACH_LOG_JSON", "true")
        monkeypatch.setenv("COACH_LOG_REDACT", "false")

        config = LoggingConfig()

        assert config.log_file == tmp_path / "env.log"
        assert config.json_format is True
        assert config.redact_secrets is False

    def test_unprefixed_env_ignored(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FILE", str(tmp_path / "stray.log"))
        monkeypatch.setenv("JSON", "true")
        monkeypatch.setenv("REDACT", "false")

        config = LoggingConfig()

        assert config.log_file is None
        assert config.json_format is False
        assert config.redact_secrets is True


class TestSensitiveDataFilter:
    """Маскирование секретов."""

    def test_api_key_in_message(self):
        record = _record(f"Using key {FAKE_KEY}")

        assert SensitiveDataFilter().filter(record) is True
        assert FAKE_KEY not in record.msg
        assert REDACTED in record.msg

    def test_key_query_param_keeps_name(self):
        record = _record("GET /v1/models?key=abcdefghijklmnopqrstuvwxyz")
        SensitiveDataFilter().filter(record)
        assert f"key={REDACTED}" in record.msg

    def test_args_and_extra(self):
        record = _record("%s", error=f"bad key {FAKE_KEY}")
        record.args = ({"token": FAKE_KEY},)

        SensitiveDataFilter().filter(record)

        assert record.args[0]["token"] == REDACTED
        assert FAKE_KEY not in record.error

    def test_plain_text_untouched(self):
        record = _record("Workout plan generated")
        SensitiveDataFilter().filter(record)
        assert record.msg == "Workout plan generated"


class TestFormatters:
    @pytest.mark.parametrize(
        "name,emoji",
        [
            ("coach_core.infrastructure.gemini.transport", "🌐"),
            ("coach_core.infrastructure.gemini.resilience", "🛡️"),
            ("coach_core.services.coach_service", "🏋️"),
            ("coach_core.cli.commands.chat", "💬"),
            ("something.else", FALLBACK_EMOJI),
        ],
    )
    def test_module_emoji(self, name, emoji):
        assert get_module_emoji(name) == emoji

    def test_file_formatter(self):
        line = FileFormatter().format(_record("Response generated", latency_ms=12.5))

        assert "| TRANSPORT | INFO | Response generated |" in line
        assert "latency_ms=12.5" in line

    def test_json_formatter(self):
        data = json.loads(
            JSONFormatter().format(_record("Retry attempt", operation="workout_plan", attempt=1))
        )

        assert data["level"] == "INFO"
        assert data["message"] == "Retry attempt"
        assert data["context"] == {"operation": "workout_plan"}
        assert data["extra"] == {"attempt": 1}


class TestCoachLogger:
    """Тесты CoachLogger."""

    @pytest.fixture
    def captured(self):
        records: list[logging.LogRecord] = []

        class ListHandler(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = ListHandler(level=TRACE)
        root = logging.getLogger("coach_core")
        root.addHandler(handler)
        yield records
        root.removeHandler(handler)

    def test_get_logger(self):
        logger = get_logger("coach_core.test")
        assert isinstance(logger, CoachLogger)
        assert logger.name == "coach_core.test"

    def test_context_in_extra(self, captured):
        get_logger("coach_core.services.coach_service").info("Operation completed", model="m")

        record = captured[-1]
        assert record.model == "m"
        assert record.getMessage().endswith("Operation completed")
        assert record.getMessage().startswith("🏋️")

    def test_bind_prefix(self, captured):
        log = get_logger("coach_core.services").bind(operation="workout_plan")
        log.warning("Retry attempt", attempt=1)

        record = captured[-1]
        assert "[workout_plan] Retry attempt" in record.getMessage()
        assert record.operation == "workout_plan"
        assert record.attempt == 1

    def test_bind_does_not_mutate(self):
        logger = CoachLogger("coach_core.x")
        logger.bind(session_id="s1")
        assert logger._context == {}

    def test_trace_ai(self, captured):
        get_logger("coach_core.infrastructure.gemini.transport").trace_ai(
            "p" * 400,
            "ok",
            model="gemini-2.5-flash",
            tokens_in=10,
            tokens_out=5,
            duration_ms=120,
        )

        record = captured[-1]
        assert record.levelno == TRACE
        assert "model=gemini-2.5-flash" in record.getMessage()
        assert "tokens=10/5" in record.getMessage()
        assert len(record.ai_prompt) == 303
        assert record.ai_response == "ok"


class TestSetupLogging:
    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "coach.log"
        setup_logging(LoggingConfig(level="WARNING", log_file=log_file, json_format=True))
        try:
            get_logger("coach_core.test").error("Something failed", kind="generic")
            for handler in logging.getLogger("coach_core").handlers:
                handler.flush()

            data = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
            assert data["extra"]["kind"] == "generic"
        finally:
            setup_logging(LoggingConfig())

    def test_replaces_handlers(self):
        setup_logging(LoggingConfig())
        setup_logging(LoggingConfig())
        assert len(logging.getLogger("coach_core").handlers) == 1
