"""Tests for prompt building, response parsing and the OpenAI adapter."""

import json
from types import SimpleNamespace
from typing import Any

import pytest

from notion2noji_core.model_adapters.openai import OpenAIAdapter
from notion2noji_core.prompts import (
    build_card_prompt,
    build_image_prompt,
    parse_cards_response,
    parse_extraction_response,
)

EXTRACTION = {
    "document_type": "Vocabulary table",
    "visual_elements": ["table with two columns"],
    "layout_description": "Arabic left, English right",
    "text_content": {
        "arabic_text": [{"location": "row 1", "text": "بيت"}],
        "transliteration": [{"location": "row 1", "text": "bayt"}],
        "english_text": [{"location": "row 1", "text": "house"}],
        "other_text": [],
    },
    "spatial_organization": {"main_content": "a single table"},
}


class TestImageExtractionParsing:
    """Tests for turning extraction output into markdown."""

    def test_structured_response(self) -> None:
        markdown = parse_extraction_response(json.dumps(EXTRACTION))

        assert markdown.startswith("# Vocabulary table")
        assert "### Arabic Text\n- **row 1**: بيت" in markdown
        assert "- **Main**: a single table" in markdown

    def test_plain_text_fallback(self) -> None:
        assert parse_extraction_response("A photo of a menu board") == (
            "A photo of a menu board"
        )

    def test_too_short_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_extraction_response("  tiny ")

    def test_context_in_prompt(self) -> None:
        assert "Additional context: lesson image 1" in build_image_prompt(
            "lesson image 1"
        )
        assert "Additional context" not in build_image_prompt()


class TestCardParsing:
    """Tests for card generation output."""

    def test_valid_cards(self) -> None:
        cards = parse_cards_response(
            json.dumps({"cards": [{"front": "house", "back": "bayt"}]})
        )
        assert cards == [{"front": "house", "back": "bayt"}]

    def test_malformed_cards_are_dropped(self) -> None:
        cards = parse_cards_response(
            {
                "cards": [
                    {"front": "ok", "back": "fine"},
                    {"front": "", "back": "blank front"},
                    {"front": 3, "back": "number"},
                    "not a card",
                ]
            }
        )
        assert cards == [{"front": "ok", "back": "fine"}]

    def test_missing_array(self) -> None:
        with pytest.raises(ValueError, match="valid cards array"):
            parse_cards_response({"items": []})

    def test_no_valid_cards(self) -> None:
        with pytest.raises(ValueError, match="No valid cards generated"):
            parse_cards_response({"cards": [{"front": " ", "back": " "}]})

    def test_lesson_content_in_prompt(self) -> None:
        assert "marhaba means hello" in build_card_prompt("marhaba means hello")


class FakeCompletions:
    def __init__(self, content: str):
        self.content = content
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_adapter(content: str) -> tuple[OpenAIAdapter, FakeCompletions]:
    completions = FakeCompletions(content)
    adapter = OpenAIAdapter(api_key="test", vision_model="vision", text_model="text")
    adapter._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return adapter, completions


class TestOpenAIAdapter:
    """Tests for the adapter request shape."""

    @pytest.mark.asyncio
    async def test_extract_image_content(self) -> None:
        adapter, completions = make_adapter(json.dumps(EXTRACTION))

        markdown = await adapter.extract_image_content(
            "https://x/1.png", "lesson image 1"
        )

        call = completions.calls[0]
        assert call["model"] == "vision"
        assert call["response_format"]["type"] == "json_schema"
        user_content = call["messages"][1]["content"]
        assert user_content[1]["image_url"]["url"] == "https://x/1.png"
        assert "bayt" in markdown

    @pytest.mark.asyncio
    async def test_generate_cards(self) -> None:
        payload = {"cards": [{"front": "water", "back": "mayy"}]}
        adapter, completions = make_adapter(json.dumps(payload))

        cards = await adapter.generate_cards("# Drinks\n\nmayy is water")

        assert completions.calls[0]["model"] == "text"
        assert cards == [{"front": "water", "back": "mayy"}]

    @pytest.mark.asyncio
    async def test_aclose_releases_client(self) -> None:
        closed: list[bool] = []

        async def close() -> None:
            closed.append(True)

        adapter, _ = make_adapter("{}")
        adapter._client.close = close

        await adapter.aclose()
        await adapter.aclose()

        assert closed == [True]
        assert adapter._client is None
