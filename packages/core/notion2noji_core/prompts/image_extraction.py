"""Prompt and response handling for image content extraction.

Lesson images are usually photos of textbook pages or handwritten notes. The
vision model is asked for an objective, structured inventory of what is
visible; the JSON it returns is rendered to markdown so it can be embedded in
the lesson artifact next to the converted text.
"""

import json
from typing import Any

from notion2noji_core.utils.logging import get_logger

logger = get_logger(__name__)

MIN_EXTRACTED_CHARS = 10

IMAGE_EXTRACTION_SYSTEM_PROMPT = """You are an expert at analyzing and extracting content from images of Arabic language learning materials. Your task is to objectively extract and document exactly what is visible in the image.

**CRITICAL RULES:**
- Extract ONLY what is actually written or shown in the image
- Do NOT create, infer, or add translations that aren't visible
- Do NOT make judgments or interpretations about pedagogical approach
- Focus on objective documentation of visual and textual content
- Preserve exact text as written, including any spelling or formatting

**What to extract:**
- Document type (what kind of educational content this is)
- Visual elements present (photos, illustrations, diagrams, icons)
- Layout and spatial organization
- All text content with precise locations
- Exact text in Arabic script, transliteration, and English as shown"""

IMAGE_EXTRACTION_PROMPT = """Extract and document exactly what is visible in this image from Arabic language learning material.
{context}
**Extract the following information:**

**Document Type:** What kind of educational content is this? (lesson page, vocabulary list, exercise, grammar explanation, dialogue, etc.)

**Visual Elements:** List all visual elements you can see (photos, illustrations, diagrams, icons, drawings, etc.)

**Layout Description:** Describe the overall layout and how content is organized spatially on the page.

**Text Content - Extract exactly as written:**
- **Arabic Text:** All text in Arabic script, exactly as shown, with location
- **Transliteration:** All romanized/transliterated text, exactly as shown, with location
- **English Text:** All English text, exactly as written, with location
- **Other Text:** Any numbers, phonetic guides, or other text elements with location and type

**Spatial Organization:** Describe what appears in:
- Top section of the page
- Main content area
- Sidebar or margins
- Bottom section of the page

**IMPORTANT:** Only extract what is actually visible. Do not add translations, explanations, or interpretations that aren't shown in the image."""


def _located_text_schema(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "location": {"type": "string"},
        "text": {"type": "string"},
        **(extra or {}),
    }
    return {
        "type": "array",
        "items": {
            "type": "object",
            "additionalProperties": False,
            "properties": properties,
            "required": list(properties),
        },
    }


IMAGE_EXTRACTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "document_type": {"type": "string"},
        "visual_elements": {"type": "array", "items": {"type": "string"}},
        "layout_description": {"type": "string"},
        "text_content": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "arabic_text": _located_text_schema(),
                "transliteration": _located_text_schema(),
                "english_text": _located_text_schema(),
                "other_text": _located_text_schema({"type": {"type": "string"}}),
            },
            "required": ["arabic_text", "transliteration", "english_text", "other_text"],
        },
        "spatial_organization": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "top_section": {"type": "string"},
                "main_content": {"type": "string"},
                "sidebar_margins": {"type": "string"},
                "bottom_section": {"type": "string"},
            },
            "required": ["top_section", "main_content", "sidebar_margins", "bottom_section"],
        },
    },
    "required": [
        "document_type",
        "visual_elements",
        "layout_description",
        "text_content",
        "spatial_organization",
    ],
}

_TEXT_SECTIONS = (
    ("arabic_text", "Arabic Text"),
    ("transliteration", "Transliteration"),
    ("english_text", "English Text"),
)

_SPATIAL_LABELS = (
    ("top_section", "Top"),
    ("main_content", "Main"),
    ("sidebar_margins", "Sidebar/Margins"),
    ("bottom_section", "Bottom"),
)


def build_image_prompt(context: str = "") -> str:
    """Build the user prompt, optionally with a context hint."""
    context_line = f"\nAdditional context: {context}\n" if context else ""
    return IMAGE_EXTRACTION_PROMPT.format(context=context_line)


def render_extraction_markdown(data: dict[str, Any]) -> str:
    """Render the structured extraction as markdown.

    Args:
        data: Parsed JSON matching IMAGE_EXTRACTION_SCHEMA

    Returns:
        Markdown document describing the image
    """
    lines: list[str] = [f"# {data.get('document_type', 'Image')}", ""]

    lines.append("## Visual Elements")
    lines.extend(f"- {element}" for element in data.get("visual_elements", []))
    lines.append("")

    lines.append("## Layout")
    lines.append(str(data.get("layout_description", "")))
    lines.append("")

    lines.append("## Text Content")
    lines.append("")
    text_content = data.get("text_content") or {}
    for key, heading in _TEXT_SECTIONS:
        items = text_content.get(key) or []
        if not items:
            continue
        lines.append(f"### {heading}")
        lines.extend(f"- **{item['location']}**: {item['text']}" for item in items)
        lines.append("")

    other = text_content.get("other_text") or []
    if other:
        lines.append("### Other Text")
        lines.extend(
            f"- **{item['location']}** ({item.get('type', 'other')}): {item['text']}"
            for item in other
        )
        lines.append("")

    lines.append("## Spatial Organization")
    spatial = data.get("spatial_organization") or {}
    for key, label in _SPATIAL_LABELS:
        if spatial.get(key):
            lines.append(f"- **{label}**: {spatial[key]}")

    return "\n".join(lines).strip()


def parse_extraction_response(content: str) -> str:
    """Turn the raw model output into validated markdown.

    Structured output is rendered; anything that is not the expected JSON is
    used as plain text.

    Raises:
        ValueError: If the extracted content is empty or too short
    """
    try:
        data = json.loads(content)
        markdown = (
            render_extraction_markdown(data) if isinstance(data, dict) else content.strip()
        )
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        logger.warning(f"Unstructured image extraction response, using raw text: {e}")
        markdown = (content or "").strip()

    if len(markdown) < MIN_EXTRACTED_CHARS:
        raise ValueError("Extracted content is too short or empty")
    return markdown
