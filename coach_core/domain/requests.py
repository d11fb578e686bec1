"""DTO запросов к модели.

Классы:
    OperationKind
        Идентификаторы операций клиента.
    ModelTier
        Класс модели: облегчённая, полная, генерация изображений.
    ResponseKind
        Как разбирать ответ: текст, JSON, grounding, изображение, ссылка.
    FailurePolicy
        Что делать с фатальной ошибкой: пробросить или подавить.
    InputPart
        Часть входа: текст или base64 + MIME-тип.
    MediaPayload
        base64 + MIME-тип на выходе.
    OperationRequest
        Неизменяемый конверт одного вызова.
    ChatTurn
        Реплика в истории чата.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional

from coach_core.utils.media import decode_base64


class OperationKind(str, Enum):
    VIDEO_ANALYSIS = "video_analysis"
    WORKOUT_PLAN = "workout_plan"
    GROUNDED_ANSWER = "grounded_answer"
    POSE_ANALYSIS = "pose_analysis"
    IMAGE_EDIT = "image_edit"
    CHAT = "chat"
    QUICK_CHAT = "quick_chat"
    QUICK_REPLY = "quick_reply"
    FOOD_RECOGNITION = "food_recognition"
    NUTRITION_ANALYSIS = "nutrition_analysis"
    VIDEO_LOOKUP = "video_lookup"
    AUDIO_TRANSCRIPTION = "audio_transcription"


class ModelTier(str, Enum):
    """Класс модели.

    Attributes:
        LITE: Быстрая дешёвая модель для best-effort ответов.
        FULL: Основная модель.
        IMAGE: Модель, умеющая возвращать изображения.
    """

    LITE = "lite"
    FULL = "full"
    IMAGE = "image"


class ResponseKind(str, Enum):
    TEXT = "text"
    JSON = "json"
    GROUNDED = "grounded"
    IMAGE = "image"
    LINK = "link"


class FailurePolicy(str, Enum):
    """PROPAGATE - ошибка уходит вызывающему; SUPPRESS - возвращается fallback."""

    PROPAGATE = "propagate"
    SUPPRESS = "suppress"


@dataclass(frozen=True)
class InputPart:
    """Часть входа: либо text, либо data (base64) + mime_type.

    Attributes:
        text: Текстовая часть.
        data: base64-текст бинарной части.
        mime_type: MIME-тип бинарной части.
    """

    text: Optional[str] = None
    data: Optional[str] = None
    mime_type: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.data is None):
            raise ValueError("InputPart must hold exactly one of text or data")
        if self.data is not None and not self.mime_type:
            raise ValueError("Binary InputPart requires mime_type")

    @classmethod
    def from_text(cls, text: str) -> "InputPart":
        return cls(text=text)

    @classmethod
    def from_base64(cls, data: str, mime_type: str) -> "InputPart":
        return cls(data=data, mime_type=mime_type)

    @property
    def is_binary(self) -> bool:
        return self.data is not None

    def to_bytes(self) -> bytes:
        """Декодирует бинарную часть.

        Raises:
            ValueError: Если часть текстовая или base64 некорректен.
        """
        if self.data is None:
            raise ValueError("Text part has no binary payload")
        return decode_base64(self.data)


@dataclass(frozen=True)
class MediaPayload:
    """Бинарный результат в виде base64 + MIME-тип."""

    data: str
    mime_type: str


@dataclass(frozen=True)
class OperationRequest:
    """Конверт одного вызова модели.

    schema и use_search взаимоисключающие: ответ с поиском - это текст
    плюс метаданные цитат, а не JSON по схеме.

    Attributes:
        kind: Операция.
        parts: Части входа в порядке вызывающей стороны.
        tier: Класс модели.
        schema: Тип ожидаемого JSON (например, list[WorkoutDay]).
        use_search: Включить Google Search grounding.
        system_instruction: Системная инструкция.
    """

    kind: OperationKind
    parts: tuple[InputPart, ...]
    tier: ModelTier = ModelTier.FULL
    schema: Any = None
    use_search: bool = False
    system_instruction: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError("OperationRequest requires at least one input part")
        if self.schema is not None and self.use_search:
            raise ValueError("Structured output schema and search grounding are mutually exclusive")
        # list -> tuple, чтобы запрос оставался неизменяемым
        object.__setattr__(self, "parts", tuple(self.parts))


@dataclass
class ChatTurn:
    """Реплика в истории чата.

    Attributes:
        role: "user" или "model".
        parts: Части реплики.
    """

    role: Literal["user", "model"]
    parts: list[InputPart] = field(default_factory=list)

    @classmethod
    def user(cls, text: str) -> "ChatTurn":
        return cls(role="user", parts=[InputPart.from_text(text)])

    @classmethod
    def model(cls, text: str) -> "ChatTurn":
        return cls(role="model", parts=[InputPart.from_text(text)])

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.parts if p.text is not None)
