"""Тесты infrastructure/gemini/request_builder.py."""

import base64

import pytest
from google.genai import types

from coach_core.config import CoachConfig
from coach_core.domain.requests import (
    ChatTurn,
    InputPart,
    ModelTier,
    OperationKind,
    OperationRequest,
)
from coach_core.domain.results import NutritionInfo, WorkoutDay
from coach_core.infrastructure.gemini.request_builder import (
    SAFETY_SETTINGS,
    build_chat_config,
    build_payload,
    select_model,
    turn_to_content,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"
PNG_B64 = base64.b64encode(PNG_BYTES).decode()


def _request(**kwargs) -> OperationRequest:
    defaults = {
        "kind": OperationKind.QUICK_REPLY,
        "parts": (InputPart.from_text("hello"),),
    }
    defaults.update(kwargs)
    return OperationRequest(**defaults)


class TestSelectModel:
    """Модель по классу."""

    def test_defaults(self, config):
        assert select_model(ModelTier.LITE, config) == "gemini-flash-lite-latest"
        assert select_model(ModelTier.FULL, config) == "gemini-2.5-flash"
        assert select_model(ModelTier.IMAGE, config) == "gemini-2.5-flash-image"

    def test_configured_models(self):
        config = CoachConfig(full_model="gemini-2.5-pro", lite_model="lite-x")
        assert select_model(ModelTier.FULL, config) == "gemini-2.5-pro"
        assert select_model(ModelTier.LITE, config) == "lite-x"


class TestBuildPayload:
    """Тесты для build_payload."""

    def test_text_request(self, config):
        payload = build_payload(_request(tier=ModelTier.LITE), config)

        assert payload.model == "gemini-flash-lite-latest"
        assert len(payload.contents) == 1
        assert payload.contents[0].role == "user"
        assert payload.contents[0].parts[0].text == "hello"
        assert payload.config.response_schema is None
        assert payload.config.tools is None
        assert payload.config.temperature == config.temperature
        assert payload.config.max_output_tokens == config.max_output_tokens

    def test_part_order_preserved(self, config):
        """Бинарные части декодируются, порядок вызывающего сохраняется."""
        request = _request(
            parts=[
                InputPart.from_text("first"),
                InputPart.from_base64(PNG_B64, "image/png"),
                InputPart.from_text("last"),
            ]
        )

        parts = build_payload(request, config).contents[0].parts

        assert parts[0].text == "first"
        assert parts[1].inline_data.data == PNG_BYTES
        assert parts[1].inline_data.mime_type == "image/png"
        assert parts[2].text == "last"

    def test_schema_sets_json_mode(self, config):
        payload = build_payload(_request(schema=list[WorkoutDay]), config)

        assert payload.config.response_mime_type == "application/json"
        assert payload.config.response_schema is not None
        assert payload.config.tools is None

    def test_model_schema(self, config):
        payload = build_payload(_request(schema=NutritionInfo), config)
        assert payload.config.response_mime_type == "application/json"

    def test_search_tool(self, config):
        payload = build_payload(_request(use_search=True), config)

        assert len(payload.config.tools) == 1
        assert payload.config.tools[0].google_search is not None
        assert payload.config.response_schema is None
        assert payload.config.response_mime_type is None

    def test_image_tier_modalities(self, config):
        payload = build_payload(_request(tier=ModelTier.IMAGE), config)

        assert payload.model == "gemini-2.5-flash-image"
        assert payload.config.response_modalities == ["IMAGE", "TEXT"]

    def test_system_instruction_and_safety(self, config):
        payload = build_payload(_request(system_instruction="Be Reddy"), config)

        assert payload.config.system_instruction == "Be Reddy"
        assert payload.config.safety_settings == SAFETY_SETTINGS
        assert all(
            s.threshold == types.HarmBlockThreshold.BLOCK_ONLY_HIGH
            for s in payload.config.safety_settings
        )

    def test_invalid_base64_fails_before_transport(self, config):
        request = _request(parts=[InputPart.from_base64("not base64!!", "image/png")])

        with pytest.raises(ValueError, match="Invalid base64"):
            build_payload(request, config)


class TestChatHelpers:
    """Конфиг и история чата."""

    def test_turn_to_content(self):
        content = turn_to_content(ChatTurn.user("Hi"))
        assert content.role == "user"
        assert content.parts[0].text == "Hi"

    def test_chat_config(self, config):
        chat_config = build_chat_config(config, "persona")
        assert chat_config.system_instruction == "persona"
        assert chat_config.safety_settings == SAFETY_SETTINGS
