"""Prompt and response handling for flashcard generation."""

import json
from typing import Any

from notion2noji_core.utils.logging import get_logger

logger = get_logger(__name__)

CARD_GENERATION_SYSTEM_PROMPT = """You are an expert Lebanese Arabic language teacher who creates effective flashcards for language learning. You understand the nuances of Lebanese dialect and Modern Standard Arabic, and create cards that help students learn both dialects simultaneously.

Your expertise includes:
- Lebanese Arabic dialect (Levantine Arabic)
- Modern Standard Arabic (MSA/Fusha)
- Dialectal differences and similarities between Lebanese and MSA
- Effective spaced repetition learning principles
- Cultural context and practical usage
- Pronunciation guidance
- Multilingual support (English and French input languages)
- Spelling correction in Arabic, English, and French"""

CARD_GENERATION_PROMPT = """Based on the following Lebanese Arabic lesson notes, create flashcards that will help a student learn effectively.

<LessonContent>
{lesson_content}
</LessonContent>

IMPORTANT NOTES ABOUT THE SOURCE MATERIAL:
- These are student notes, which may contain mistakes, typos, spelling errors, or incomplete information
- Fix spelling mistakes in Arabic, English, and French text
- If Lebanese translations are missing or incomplete, provide the correct Lebanese version
- Complete obvious sequences or missing elements within the same topic (e.g. a missing number in 1, 2, 3, 5)
- Don't add entirely new topics or concepts not mentioned in the notes
- Notes use the syntax "word(lebanese version): meaning", sometimes "word singular -> word plural: meaning"
- Content inside <image> tags was extracted from photos of the lesson material

Guidelines:
1. COMPREHENSIVE COVERAGE: cover ALL vocabulary, phrases, grammar concepts and cultural information from the lesson.
2. DUAL DIALECT: include both Lebanese and MSA versions when they differ, labelled "Lebanese:" and "MSA:"; say so when they are the same.
3. CARD TYPES:
   - Recognition: front = Arabic script only, back = English/French translation + pronunciation + dialect info
   - Production: front = English/French, back = Lebanese Arabic script only (and a separate MSA card when it differs)
   - Dialect comparison, grammar, cultural context and pronunciation cards where relevant
4. Use Arabic script (no Latin letters) for Arabic content, with pronunciation hints in parentheses when helpful.
5. Basic HTML is allowed on both sides: <h1>-<h3>, <p>, <strong>, <em>, <u>, <s>, <ul>, <ol>, <li>, <br>.

Respond with a JSON object with a "cards" array of objects with "front" and "back".

Example:
{{
  "cards": [
    {{"front": "<h3>بيت</h3>", "back": "<p><strong>House / Maison</strong></p><p>Pronunciation: /bayt/</p><p>Same in Lebanese and MSA</p>"}},
    {{"front": "<p>What's the Lebanese word for 'I want'?</p>", "back": "<h3>بدي</h3><p>Pronunciation: /biddi/</p>"}}
  ]
}}

JSON:"""

CARD_GENERATION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "cards": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "front": {"type": "string"},
                    "back": {"type": "string"},
                },
                "required": ["front", "back"],
            },
        }
    },
    "required": ["cards"],
}


def build_card_prompt(lesson_content: str) -> str:
    """Build the user prompt for one lesson artifact."""
    return CARD_GENERATION_PROMPT.format(lesson_content=lesson_content)


def _is_valid_card(card: Any) -> bool:
    if not isinstance(card, dict):
        return False
    front, back = card.get("front"), card.get("back")
    return (
        isinstance(front, str)
        and isinstance(back, str)
        and bool(front.strip())
        and bool(back.strip())
    )


def parse_cards_response(content: str | dict[str, Any]) -> list[dict[str, Any]]:
    """Extract the valid cards from a generation response.

    Args:
        content: Raw JSON string or already parsed payload

    Returns:
        Card dictionaries with non-blank front and back

    Raises:
        ValueError: If the payload has no cards array or no valid card
    """
    data = json.loads(content) if isinstance(content, str) else content
    cards = data.get("cards") if isinstance(data, dict) else None
    if not isinstance(cards, list):
        raise ValueError("Response does not contain a valid cards array")

    valid = [card for card in cards if _is_valid_card(card)]
    if not valid:
        raise ValueError("No valid cards generated")

    if len(valid) < len(cards):
        logger.warning(f"Dropped {len(cards) - len(valid)} malformed cards")
    logger.info(f"Generated {len(valid)} valid cards")
    return valid
