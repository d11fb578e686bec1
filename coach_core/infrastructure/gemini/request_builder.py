"""Сборка запросов к Gemini из OperationRequest.

Функции:
    build_payload
        OperationRequest + CoachConfig -> GeminiPayload.
    build_chat_config
        Конфиг генерации для чат-сессии.
    turn_to_content
        ChatTurn -> types.Content.
    select_model
        Имя модели по классу.
"""

from typing import Optional

from google.genai import types

from coach_core.config import CoachConfig
from coach_core.domain.requests import ChatTurn, InputPart, ModelTier, OperationRequest
from coach_core.interfaces.transport import GeminiPayload
from coach_core.utils.logger import get_logger

logger = get_logger(__name__)

SAFETY_SETTINGS: list[types.SafetySetting] = [
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH,
    ),
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH,
    ),
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH,
    ),
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH,
    ),
]


def select_model(tier: ModelTier, config: CoachConfig) -> str:
    if tier is ModelTier.LITE:
        return config.lite_model
    if tier is ModelTier.IMAGE:
        return config.image_model
    return config.full_model


def part_to_sdk(part: InputPart) -> types.Part:
    """InputPart -> types.Part.

    Raises:
        ValueError: Некорректный base64.
    """
    if part.is_binary:
        return types.Part.from_bytes(data=part.to_bytes(), mime_type=part.mime_type)
    return types.Part.from_text(text=part.text)


def turn_to_content(turn: ChatTurn) -> types.Content:
    return types.Content(role=turn.role, parts=[part_to_sdk(p) for p in turn.parts])


def build_payload(request: OperationRequest, config: CoachConfig) -> GeminiPayload:
    """Собирает запрос к generate_content.

    Части входа кладутся в одну user-реплику в исходном порядке.
    Бинарные части декодируются здесь, до любого сетевого вызова.

    Args:
        request: Описание вызова.
        config: Модели, температура, лимит токенов.

    Returns:
        GeminiPayload.

    Raises:
        ValueError: Если бинарная часть содержит некорректный base64.
    """
    model = select_model(request.tier, config)
    parts = [part_to_sdk(p) for p in request.parts]

    options: dict = {
        "system_instruction": request.system_instruction,
        "temperature": config.temperature,
        "max_output_tokens": config.max_output_tokens,
        "safety_settings": SAFETY_SETTINGS,
    }

    if request.schema is not None:
        options["response_mime_type"] = "application/json"
        options["response_schema"] = request.schema

    if request.use_search:
        options["tools"] = [types.Tool(google_search=types.GoogleSearch())]

    if request.tier is ModelTier.IMAGE:
        options["response_modalities"] = ["IMAGE", "TEXT"]

    generation_config = types.GenerateContentConfig(**options)

    logger.debug(
        "Payload built",
        operation=request.kind.value,
        model=model,
        parts=len(parts),
        binary_parts=sum(1 for p in request.parts if p.is_binary),
        structured=request.schema is not None,
        search=request.use_search,
    )

    return GeminiPayload(
        model=model,
        contents=[types.Content(role="user", parts=parts)],
        config=generation_config,
    )


def build_chat_config(
    config: CoachConfig,
    system_instruction: Optional[str] = None,
) -> types.GenerateContentConfig:
    """Конфиг генерации для чата: те же температура, лимит и safety."""
    return types.GenerateContentConfig(
        system_instruction=system_instruction,
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
        safety_settings=SAFETY_SETTINGS,
    )


__all__ = [
    "SAFETY_SETTINGS",
    "build_chat_config",
    "build_payload",
    "part_to_sdk",
    "select_model",
    "turn_to_content",
]
