"""Prompts for the model calls made by the pipeline."""

from notion2noji_core.prompts.card_generation import (
    CARD_GENERATION_SCHEMA,
    CARD_GENERATION_SYSTEM_PROMPT,
    build_card_prompt,
    parse_cards_response,
)
from notion2noji_core.prompts.image_extraction import (
    IMAGE_EXTRACTION_SCHEMA,
    IMAGE_EXTRACTION_SYSTEM_PROMPT,
    build_image_prompt,
    parse_extraction_response,
    render_extraction_markdown,
)

__all__ = [
    "CARD_GENERATION_SCHEMA",
    "CARD_GENERATION_SYSTEM_PROMPT",
    "build_card_prompt",
    "parse_cards_response",
    "IMAGE_EXTRACTION_SCHEMA",
    "IMAGE_EXTRACTION_SYSTEM_PROMPT",
    "build_image_prompt",
    "parse_extraction_response",
    "render_extraction_markdown",
]
