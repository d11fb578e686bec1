"""Разбор ответов Gemini в типизированные результаты.

Функции:
    extract_result
        Диспетчер по ResponseKind.
    extract_text, extract_json, extract_grounded, extract_image, extract_link
        Разбор конкретного вида ответа.
    extract_citations
        Цитаты из grounding-метаданных.
"""

import json
import re
from typing import Any, Optional

from google.genai import types
from pydantic import TypeAdapter, ValidationError

from coach_core.domain.errors import (
    GenerationError,
    MalformedOutputError,
    NoImageReturnedError,
    SafetyBlockedError,
)
from coach_core.domain.requests import MediaPayload, OperationRequest, ResponseKind
from coach_core.domain.results import Citation, GroundedAnswer
from coach_core.utils.logger import get_logger
from coach_core.utils.media import encode_base64

logger = get_logger(__name__)

EMPTY_RESPONSE_MESSAGE = "The AI returned an empty response."
DEFAULT_IMAGE_MIME = "image/png"

YOUTUBE_URL_RE = re.compile(
    r"https?://(?:www\.|m\.)?"
    r"(?:youtube\.com/(?:watch\?\S*?\bv=|shorts/)|youtu\.be/)"
    r"[^\s)\]>\"'<]+",
    re.IGNORECASE,
)

# Знаки препинания, которыми модель заканчивает предложение после ссылки
TRAILING_PUNCTUATION = ".,;:!?"


def _first_candidate(response: types.GenerateContentResponse) -> Optional[types.Candidate]:
    if response.candidates:
        return response.candidates[0]
    return None


def _response_text(response: types.GenerateContentResponse) -> str:
    """Текст ответа без предупреждений SDK о нетекстовых частях."""
    candidate = _first_candidate(response)
    if candidate is None or candidate.content is None or not candidate.content.parts:
        return ""
    return "".join(part.text for part in candidate.content.parts if part.text)


def extract_text(response: types.GenerateContentResponse) -> str:
    """Текст ответа.

    Raises:
        GenerationError: Пустой ответ.
    """
    text = _response_text(response)
    if not text.strip():
        raise GenerationError(EMPTY_RESPONSE_MESSAGE)
    return text


def extract_json(response: types.GenerateContentResponse, schema: Any) -> Any:
    """Парсит JSON и проверяет форму.

    Ответ не чинится и не приводится: обёртка ```json```, обрезанный JSON
    или значения не того типа (например, "500" вместо 500) считаются ошибкой.

    Args:
        response: Ответ модели.
        schema: Ожидаемый тип (pydantic-модель, list[...] и т.п.).

    Returns:
        Значение, прошедшее валидацию TypeAdapter.

    Raises:
        MalformedOutputError: JSON не парсится или не совпадает со схемой.
    """
    text = _response_text(response)

    try:
        json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(
            "Structured response is not valid JSON",
            error=str(e),
            text_length=len(text),
        )
        raise MalformedOutputError(
            f"The AI returned an invalid JSON response: {e}", raw_text=text
        ) from e

    try:
        return TypeAdapter(schema).validate_json(text, strict=True)
    except ValidationError as e:
        logger.warning(
            "Structured response does not match schema",
            errors=e.error_count(),
        )
        raise MalformedOutputError(
            f"The AI response does not match the expected format: {e.error_count()} validation error(s)",
            raw_text=text,
        ) from e


def extract_citations(response: types.GenerateContentResponse) -> list[Citation]:
    """Цитаты в порядке grounding_chunks, без повторов URI.

    Чанки без URI пропускаются. Нет метаданных - пустой список.
    """
    candidate = _first_candidate(response)
    metadata = candidate.grounding_metadata if candidate else None
    if metadata is None or not metadata.grounding_chunks:
        return []

    citations: list[Citation] = []
    seen: set[str] = set()

    for chunk in metadata.grounding_chunks:
        source = chunk.web or chunk.retrieved_context
        if source is None or not source.uri or source.uri in seen:
            continue
        seen.add(source.uri)
        citations.append(Citation(uri=source.uri, title=source.title))

    return citations


def extract_grounded(response: types.GenerateContentResponse) -> GroundedAnswer:
    """Текст + цитаты.

    Raises:
        SafetyBlockedError: finish_reason первого кандидата SAFETY.
    """
    candidate = _first_candidate(response)
    if candidate is not None and candidate.finish_reason == types.FinishReason.SAFETY:
        logger.warning("Response blocked by safety filters")
        raise SafetyBlockedError()

    citations = extract_citations(response)
    logger.debug("Grounded answer extracted", citations=len(citations))
    return GroundedAnswer(text=_response_text(response), citations=citations)


def extract_image(response: types.GenerateContentResponse) -> MediaPayload:
    """Первая inline-картинка ответа.

    Raises:
        NoImageReturnedError: В ответе нет бинарных данных.
    """
    candidate = _first_candidate(response)
    parts = candidate.content.parts if candidate and candidate.content else None

    for part in parts or []:
        if part.inline_data is not None and part.inline_data.data:
            return MediaPayload(
                data=encode_base64(part.inline_data.data),
                mime_type=part.inline_data.mime_type or DEFAULT_IMAGE_MIME,
            )

    raise NoImageReturnedError()


def extract_link(response: types.GenerateContentResponse) -> Optional[str]:
    """Первая ссылка на YouTube в тексте или None."""
    match = YOUTUBE_URL_RE.search(_response_text(response))
    return match.group(0).rstrip(TRAILING_PUNCTUATION) if match else None


def extract_result(
    response: types.GenerateContentResponse,
    request: OperationRequest,
    response_kind: ResponseKind,
) -> Any:
    """Разбирает ответ согласно виду операции.

    Args:
        response: Ответ generate_content.
        request: Исходный запрос (schema для JSON).
        response_kind: Вид ответа операции.

    Returns:
        str, провалидированный JSON, GroundedAnswer, MediaPayload или str | None.
    """
    if response_kind is ResponseKind.JSON:
        return extract_json(response, request.schema)
    if response_kind is ResponseKind.GROUNDED:
        return extract_grounded(response)
    if response_kind is ResponseKind.IMAGE:
        return extract_image(response)
    if response_kind is ResponseKind.LINK:
        return extract_link(response)
    return extract_text(response)


__all__ = [
    "YOUTUBE_URL_RE",
    "extract_citations",
    "extract_grounded",
    "extract_image",
    "extract_json",
    "extract_link",
    "extract_result",
    "extract_text",
]
