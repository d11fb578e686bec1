"""Фасад операций фитнес-ассистента.

Каждая операция проходит один конвейер:
build_payload -> run_with_retry(transport.generate) -> extract_result.

Классы:
    CoachService
        Типизированные асинхронные операции поверх транспорта Gemini.
"""

import asyncio
from typing import Any, Optional, Sequence

from coach_core.config import CoachConfig, get_config
from coach_core.domain.errors import CoachAPIError
from coach_core.domain.requests import (
    ChatTurn,
    InputPart,
    MediaPayload,
    OperationKind,
    OperationRequest,
)
from coach_core.domain.results import GroundedAnswer, NutritionInfo, WorkoutDay
from coach_core.infrastructure.gemini import prompts
from coach_core.infrastructure.gemini.request_builder import (
    build_chat_config,
    build_payload,
    select_model,
)
from coach_core.infrastructure.gemini.resilience import ProgressCallback, run_with_retry
from coach_core.infrastructure.gemini.response_extractor import extract_result
from coach_core.infrastructure.gemini.stream_session import ChatSession, FragmentStream
from coach_core.infrastructure.gemini.transport import GeminiTransport
from coach_core.interfaces.transport import BaseTransport
from coach_core.services.operations import OperationSpec, get_operation
from coach_core.utils.logger import get_logger

logger = get_logger(__name__)


class CoachService:
    """Клиент фитнес-ассистента.

    Создаётся явно и не хранит состояния между вызовами: каждый вызов
    получает собственный RetryState, чат-сессии принадлежат вызывающему.

    Критичные операции пробрасывают CoachAPIError, best-effort операции
    (быстрые ответы, поиск видео) логируют сбой и возвращают fallback.

    Example:
        >>> service = CoachService.from_config()
        >>> plan = await service.generate_workout_plan("dumbbells", "beginner", "strength")
        >>> plan[0].exercises[0].name
        'Goblet Squat'
    """

    def __init__(
        self,
        transport: BaseTransport,
        config: Optional[CoachConfig] = None,
    ) -> None:
        self.transport = transport
        self.config = config or get_config()

    @classmethod
    def from_config(cls, config: Optional[CoachConfig] = None) -> "CoachService":
        """Сервис с GeminiTransport на ключе из конфигурации.

        Raises:
            ValueError: Ключ не настроен.
        """
        config = config or get_config()
        return cls(GeminiTransport(api_key=config.require_api_key()), config)

    @property
    def persona_prompt(self) -> str:
        return prompts.build_persona_prompt(self.config.assistant_name)

    async def _execute(
        self,
        spec: OperationSpec,
        parts: Sequence[InputPart],
        *,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Any:
        """Выполняет операцию по её описанию.

        Raises:
            CoachAPIError: Сбой критичной операции.
            ValueError: Некорректный base64 во входе (до сетевого вызова).
        """
        log = logger.bind(operation=spec.kind.value)

        request = OperationRequest(
            kind=spec.kind,
            parts=tuple(parts),
            tier=spec.tier,
            schema=spec.schema,
            use_search=spec.use_search,
            system_instruction=self.persona_prompt if spec.use_persona else None,
        )
        payload = build_payload(request, self.config)

        log.debug("Operation started", model=payload.model, tier=spec.tier.value)

        try:
            response = await run_with_retry(
                lambda: self.transport.generate(payload),
                max_attempts=self.config.max_attempts,
                base_delay=self.config.retry_base_delay,
                on_progress=on_progress,
                cancel_event=cancel_event,
                failure_prefix=spec.failure_prefix,
            )
            result = extract_result(response, request, spec.response_kind)
        except CoachAPIError as e:
            if spec.best_effort:
                log.warning(
                    "Best-effort operation failed, returning fallback",
                    kind=e.kind.value,
                    error_type=type(e).__name__,
                )
                return spec.fallback
            log.error(
                "Operation failed",
                kind=e.kind.value,
                error_type=type(e).__name__,
            )
            raise

        log.info("Operation completed", model=payload.model)
        return result

    # === Тренировки ===

    async def analyze_video_with_frames(
        self,
        prompt: str,
        frames: Sequence[str],
        on_progress: Optional[ProgressCallback] = None,
        mime_type: str = "image/jpeg",
        refinement: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> str:
        """Анализ техники по кадрам видео.

        Args:
            prompt: Запрос пользователя.
            frames: Кадры в base64, в порядке следования.
            on_progress: Колбэк повторов (неудачных_попыток, max_attempts).
            mime_type: MIME-тип кадров.
            refinement: Уточнение для повторного анализа.
            cancel_event: Токен отмены ожидания между попытками.

        Returns:
            Текст анализа.
        """
        parts = [InputPart.from_text(prompts.build_video_prompt(prompt, refinement))]
        parts.extend(InputPart.from_base64(frame, mime_type) for frame in frames)

        return await self._execute(
            get_operation(OperationKind.VIDEO_ANALYSIS),
            parts,
            on_progress=on_progress,
            cancel_event=cancel_event,
        )

    async def generate_workout_plan(
        self,
        equipment: str,
        level: str,
        goal: str,
        on_progress: Optional[ProgressCallback] = None,
        is_regeneration: bool = False,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> list[WorkoutDay]:
        """Структурированный план тренировок.

        Args:
            equipment: Доступный инвентарь.
            level: Уровень подготовки.
            goal: Цель.
            on_progress: Колбэк повторов.
            is_regeneration: Просить вариант, отличный от предыдущего.
            cancel_event: Токен отмены.

        Returns:
            Упорядоченный список дней.

        Raises:
            MalformedOutputError: Ответ не совпал со схемой плана.
        """
        prompt = prompts.build_workout_plan_prompt(equipment, level, goal, is_regeneration)
        return await self._execute(
            get_operation(OperationKind.WORKOUT_PLAN),
            [InputPart.from_text(prompt)],
            on_progress=on_progress,
            cancel_event=cancel_event,
        )

    async def analyze_pose(self, question: str, image_base64: str, mime_type: str) -> str:
        return await self._execute(
            get_operation(OperationKind.POSE_ANALYSIS),
            [
                InputPart.from_base64(image_base64, mime_type),
                InputPart.from_text(prompts.POSE_ANALYSIS_TEMPLATE.format(question=question)),
            ],
        )

    async def find_youtube_video_for_exercise(self, exercise_name: str) -> Optional[str]:
        """Ссылка на видео с техникой упражнения или None."""
        prompt = prompts.VIDEO_LOOKUP_TEMPLATE.format(exercise_name=exercise_name)
        return await self._execute(
            get_operation(OperationKind.VIDEO_LOOKUP),
            [InputPart.from_text(prompt)],
        )

    # === Вопросы и ответы ===

    async def get_grounded_answer(self, question: str) -> GroundedAnswer:
        """Ответ с источниками из Google Search.

        Raises:
            SafetyBlockedError: Ответ заблокирован фильтрами безопасности.
        """
        prompt = prompts.GROUNDED_ANSWER_TEMPLATE.format(question=question)
        return await self._execute(
            get_operation(OperationKind.GROUNDED_ANSWER),
            [InputPart.from_text(prompt)],
        )

    async def get_quick_chat_response(self, message: str) -> str:
        """Короткий ответ персоны. При сбое пустая строка."""
        return await self._execute(
            get_operation(OperationKind.QUICK_CHAT),
            [InputPart.from_text(message)],
        )

    async def get_quick_response(self, question: str) -> str:
        return await self._execute(
            get_operation(OperationKind.QUICK_REPLY),
            [InputPart.from_text(prompts.QUICK_RESPONSE_TEMPLATE.format(question=question))],
        )

    # === Чат ===

    async def open_chat(self, history: Optional[Sequence[ChatTurn]] = None) -> ChatSession:
        """Новая чат-сессия, засеянная историей. Принадлежит вызывающему.

        Модель, персона и префикс ошибок берутся из описания операции CHAT.
        """
        spec = get_operation(OperationKind.CHAT)
        system_instruction = self.persona_prompt if spec.use_persona else None
        return await ChatSession.create(
            self.transport,
            list(history or []),
            model=select_model(spec.tier, self.config),
            config=build_chat_config(self.config, system_instruction),
            failure_prefix=spec.failure_prefix,
        )

    async def get_chat_response_stream(
        self,
        history: Sequence[ChatTurn],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> FragmentStream:
        """Поток ответа на последнюю реплику истории.

        Без повторов: сбой открытия или чтения потока сразу уходит вызывающему.

        Args:
            history: Реплики чата, последняя - новое сообщение пользователя.
            cancel_event: Токен отмены, проверяется между фрагментами.

        Raises:
            ValueError: История пуста или последняя реплика не от пользователя.
        """
        if not history or history[-1].role != "user":
            raise ValueError("Chat history must end with a user turn")

        session = await self.open_chat(history[:-1])
        logger.debug(
            "Streaming chat response",
            session_id=session.session_id,
            history_turns=len(history) - 1,
        )
        return await session.send(history[-1].text, cancel_event=cancel_event)

    # === Медиа ===

    async def edit_image(self, prompt: str, image_base64: str, mime_type: str) -> MediaPayload:
        """Редактирование изображения по текстовой инструкции.

        Raises:
            NoImageReturnedError: Модель не вернула изображение.
        """
        return await self._execute(
            get_operation(OperationKind.IMAGE_EDIT),
            [
                InputPart.from_base64(image_base64, mime_type),
                InputPart.from_text(prompt),
            ],
        )

    async def transcribe_audio(self, audio_base64: str, mime_type: str) -> str:
        return await self._execute(
            get_operation(OperationKind.AUDIO_TRANSCRIPTION),
            [
                InputPart.from_base64(audio_base64, mime_type),
                InputPart.from_text(prompts.TRANSCRIPTION_PROMPT),
            ],
        )

    # === Питание ===

    async def analyze_food_image(self, image_base64: str, mime_type: str) -> list[str]:
        """Названия блюд и продуктов на фото."""
        return await self._execute(
            get_operation(OperationKind.FOOD_RECOGNITION),
            [
                InputPart.from_base64(image_base64, mime_type),
                InputPart.from_text(prompts.FOOD_RECOGNITION_PROMPT),
            ],
        )

    async def get_nutritional_analysis(self, foods: Sequence[str]) -> NutritionInfo:
        """Оценка пищевой ценности приёма пищи.

        Raises:
            ValueError: Пустой список продуктов.
            MalformedOutputError: Ответ не совпал со схемой.
        """
        if not foods:
            raise ValueError("At least one food item is required")

        food_list = "\n".join(f"- {food}" for food in foods)
        return await self._execute(
            get_operation(OperationKind.NUTRITION_ANALYSIS),
            [InputPart.from_text(prompts.NUTRITION_ANALYSIS_TEMPLATE.format(foods=food_list))],
        )


__all__ = ["CoachService"]
