"""Транспорт на google-genai SDK.

Классы:
    GeminiTransport
        Реализация BaseTransport поверх genai.Client(...).aio.
"""

import time
from typing import Optional

from google import genai
from google.genai import types

from coach_core.interfaces.transport import BaseTransport, ChatChannel, GeminiPayload
from coach_core.utils.logger import TRACE, get_logger

logger = get_logger(__name__)


def _payload_preview(payload: GeminiPayload) -> str:
    pieces: list[str] = []
    for content in payload.contents:
        for part in content.parts or []:
            if part.text is not None:
                pieces.append(part.text)
            elif part.inline_data is not None:
                pieces.append(f"<{part.inline_data.mime_type}>")
    return " ".join(pieces)


class GeminiTransport(BaseTransport):
    """Асинхронный транспорт к Gemini API.

    Не повторяет запросы. Ошибки SDK пробрасываются без изменений.

    Example:
        >>> transport = GeminiTransport(api_key=config.require_api_key())
        >>> response = await transport.generate(payload)
    """

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        """Lazy-инициализация клиента Gemini."""
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
            logger.debug("Gemini client created")
        return self._client

    async def generate(self, payload: GeminiPayload) -> types.GenerateContentResponse:
        start_time = time.perf_counter()

        try:
            response = await self.client.aio.models.generate_content(
                model=payload.model,
                contents=payload.contents,
                config=payload.config,
            )
        except Exception as e:
            logger.debug(
                "Gemini call failed",
                model=payload.model,
                error_type=type(e).__name__,
            )
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000

        usage = response.usage_metadata
        input_tokens = usage.prompt_token_count if usage else None
        output_tokens = usage.candidates_token_count if usage else None

        finish_reason = None
        if response.candidates and response.candidates[0].finish_reason:
            finish_reason = str(response.candidates[0].finish_reason.name)

        logger.info(
            "Response generated",
            model=payload.model,
            latency_ms=round(latency_ms, 2),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason=finish_reason,
        )

        if logger.is_enabled_for(TRACE):
            response_text = "".join(
                part.text
                for candidate in (response.candidates or [])[:1]
                if candidate.content
                for part in (candidate.content.parts or [])
                if part.text
            )
            logger.trace_ai(
                prompt=_payload_preview(payload),
                response=response_text,
                model=payload.model,
                tokens_in=input_tokens,
                tokens_out=output_tokens,
                duration_ms=latency_ms,
            )

        return response

    def create_chat(
        self,
        model: str,
        history: list[types.Content],
        config: Optional[types.GenerateContentConfig] = None,
    ) -> ChatChannel:
        logger.debug("Creating chat", model=model, history_turns=len(history))
        return self.client.aio.chats.create(model=model, config=config, history=history)


__all__ = ["GeminiTransport"]
