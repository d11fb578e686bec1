"""Тесты infrastructure/gemini/resilience.py - классификация и повторы."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from coach_core.domain.errors import (
    OVERLOADED_MESSAGE,
    ApiKeyError,
    ErrorKind,
    GenerationError,
    MalformedOutputError,
    OperationCancelledError,
    ServiceOverloadedError,
)
from coach_core.infrastructure.gemini import resilience
from coach_core.infrastructure.gemini.resilience import (
    RetryState,
    classify_error,
    run_with_retry,
)


class TestClassifyError:
    """Тесты для classify_error."""

    @pytest.mark.parametrize(
        "message",
        [
            "API key not valid. Please pass a valid API key.",
            "400 INVALID_ARGUMENT: API_KEY_INVALID",
            "Invalid API key provided",
            "API key is missing",
            "Missing API key",
            "API key not found",
        ],
    )
    def test_auth_markers(self, message):
        """Маркеры ключа - AUTHENTICATION, без повторов."""
        classified = classify_error(Exception(message))
        assert classified.kind is ErrorKind.AUTHENTICATION
        assert classified.retryable is False

    @pytest.mark.parametrize(
        "message",
        ["503 overloaded", "503 unavailable", "The model is overloaded.", "UNAVAILABLE"],
    )
    def test_overloaded_markers(self, message):
        """503/overloaded/unavailable - OVERLOADED, повторяемо."""
        classified = classify_error(Exception(message))
        assert classified.kind is ErrorKind.OVERLOADED
        assert classified.retryable is True

    def test_generic(self):
        """Прочее - GENERIC."""
        classified = classify_error(ValueError("Some other error"))
        assert classified.kind is ErrorKind.GENERIC
        assert classified.retryable is False
        assert classified.message == "Some other error"

    def test_auth_wins_over_overloaded(self):
        """Первое совпадение выигрывает: ключ проверяется раньше 503."""
        classified = classify_error(Exception("503 API key not valid"))
        assert classified.kind is ErrorKind.AUTHENTICATION


class TestRetryState:
    """Тесты для RetryState."""

    def test_delays_double(self):
        state = RetryState(max_attempts=3, base_delay=2.0)
        assert state.next_delay == 2.0
        state.advance()
        assert state.next_delay == 4.0

    def test_attempts_left(self):
        state = RetryState(max_attempts=3)
        assert state.has_attempts_left
        state.advance()
        assert state.has_attempts_left
        state.advance()
        assert not state.has_attempts_left


class TestRunWithRetry:
    """Тесты для run_with_retry."""

    @pytest.mark.asyncio
    async def test_success_first_try(self, no_backoff):
        """Успех с первой попытки - без пауз."""
        attempt = AsyncMock(return_value="ok")

        result = await run_with_retry(attempt)

        assert result == "ok"
        assert attempt.await_count == 1
        no_backoff.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_auth_error_single_attempt(self, no_backoff):
        """Ошибка ключа - ровно одна попытка, ApiKeyError."""
        attempt = AsyncMock(side_effect=Exception("API key not valid"))

        with pytest.raises(ApiKeyError) as exc_info:
            await run_with_retry(attempt)

        assert attempt.await_count == 1
        assert isinstance(exc_info.value.__cause__, Exception)
        no_backoff.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_persistent_overload(self, no_backoff):
        """Три перегрузки подряд - три попытки, паузы 2.0 и 4.0."""
        attempt = AsyncMock(side_effect=Exception("503 overloaded"))
        progress = Mock()

        with pytest.raises(ServiceOverloadedError) as exc_info:
            await run_with_retry(attempt, on_progress=progress)

        assert attempt.await_count == 3
        assert [c.args[0] for c in no_backoff.await_args_list] == [2.0, 4.0]
        assert str(exc_info.value) == OVERLOADED_MESSAGE
        assert [c.args for c in progress.call_args_list] == [(1, 3), (2, 3)]

    @pytest.mark.asyncio
    async def test_overload_then_success(self, no_backoff):
        """Перегрузка, затем успех - две попытки, один вызов прогресса (1, 3)."""
        attempt = AsyncMock(side_effect=[Exception("503 unavailable"), "done"])
        progress = Mock()

        result = await run_with_retry(attempt, on_progress=progress)

        assert result == "done"
        assert attempt.await_count == 2
        progress.assert_called_once_with(1, 3)
        no_backoff.assert_awaited_once()
        assert no_backoff.await_args.args[0] == 2.0

    @pytest.mark.asyncio
    async def test_async_progress_callback(self, no_backoff):
        """Колбэк прогресса может быть корутиной."""
        attempt = AsyncMock(side_effect=[Exception("503"), "done"])
        progress = AsyncMock()

        await run_with_retry(attempt, on_progress=progress)

        progress.assert_awaited_once_with(1, 3)

    @pytest.mark.asyncio
    async def test_generic_error_uses_prefix(self, no_backoff):
        """Прочая ошибка - GenerationError с префиксом операции."""
        attempt = AsyncMock(side_effect=Exception("Some other error"))

        with pytest.raises(GenerationError) as exc_info:
            await run_with_retry(
                attempt, failure_prefix="Failed to get analysis from Gemini API"
            )

        assert str(exc_info.value) == "Failed to get analysis from Gemini API: Some other error"
        assert attempt.await_count == 1

    @pytest.mark.asyncio
    async def test_typed_error_passes_through(self, no_backoff):
        """Неповторяемые CoachAPIError не переупаковываются."""
        error = MalformedOutputError("bad json")
        attempt = AsyncMock(side_effect=error)

        with pytest.raises(MalformedOutputError) as exc_info:
            await run_with_retry(attempt)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_custom_max_attempts(self, no_backoff):
        attempt = AsyncMock(side_effect=Exception("overloaded"))

        with pytest.raises(ServiceOverloadedError):
            await run_with_retry(attempt, max_attempts=5, base_delay=1.0)

        assert attempt.await_count == 5
        assert [c.args[0] for c in no_backoff.await_args_list] == [1.0, 2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_cancelled_during_wait(self):
        """Отмена во время паузы - OperationCancelledError без новой попытки."""
        attempt = AsyncMock(side_effect=Exception("503 overloaded"))
        cancel_event = asyncio.Event()
        cancel_event.set()

        with pytest.raises(OperationCancelledError):
            await run_with_retry(attempt, base_delay=10.0, cancel_event=cancel_event)

        assert attempt.await_count == 1


class TestBackoffWait:
    """Тесты для _backoff_wait."""

    @pytest.mark.asyncio
    async def test_without_event_sleeps(self):
        assert await resilience._backoff_wait(0, None) is False

    @pytest.mark.asyncio
    async def test_timeout_not_cancelled(self):
        assert await resilience._backoff_wait(0.01, asyncio.Event()) is False

    @pytest.mark.asyncio
    async def test_event_set_is_cancelled(self):
        event = asyncio.Event()
        event.set()
        assert await resilience._backoff_wait(5.0, event) is True
