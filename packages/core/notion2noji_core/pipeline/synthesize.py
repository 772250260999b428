"""Lesson synthesis: converted text plus extracted image content.

The artifact for a lesson is its non-image blocks as markdown, followed by a
labeled section holding one ``<image>`` element per successfully extracted
image::

    ## Vocabulary
    - bayt: house

    ---

    # Images in this Lesson

    <image id="block-id">
      <extracted-content>
        ...
      </extracted-content>
    </image>

A text conversion failure propagates and fails the whole lesson. Individual
image failures are absorbed by the extractor.
"""

import re

from notion2noji_core.pipeline.extract_images import ParallelImageExtractor
from notion2noji_core.pipeline.markdown import BaseTextConverter
from notion2noji_core.schemas.blocks import Block, BlockKind
from notion2noji_core.schemas.images import CompositeArtifact, ImageExtractionResult
from notion2noji_core.schemas.lessons import Lesson
from notion2noji_core.utils.logging import get_logger

logger = get_logger(__name__)

IMAGE_SECTION_HEADING = "# Images in this Lesson"
SECTION_DELIMITER = "---"

_IMAGE_MARKUP = re.compile(r"!\[(?:\\.|[^\]\\])*\]\([^)]+\)")
_BLANK_LINE_RUNS = re.compile(r"\n\s*\n\s*\n")


def partition_blocks(blocks: list[Block]) -> tuple[list[Block], list[Block]]:
    """Split top-level blocks into image blocks and everything else.

    Relative order is preserved within each partition.
    """
    images: list[Block] = []
    others: list[Block] = []
    for block in blocks:
        (images if block.kind == BlockKind.IMAGE else others).append(block)
    return images, others


def strip_image_markup(markdown: str) -> str:
    """Remove image references left by nested container blocks.

    Blank-line runs left behind collapse to a single blank line and the
    result is trimmed.
    """
    cleaned = _IMAGE_MARKUP.sub("", markdown)
    cleaned = _BLANK_LINE_RUNS.sub("\n\n", cleaned)
    return cleaned.strip()


def indent_content(content: str, spaces: int) -> str:
    """Indent every non-blank line."""
    indent = " " * spaces
    return "\n".join(
        indent + line if line.strip() else line for line in content.split("\n")
    )


def format_image_result(result: ImageExtractionResult) -> str:
    """Format one extraction as an element keyed by its block ID."""
    return (
        f'<image id="{result.block_id}">\n'
        f"  <extracted-content>\n"
        f"{indent_content(result.extracted_content, 4)}\n"
        f"  </extracted-content>\n"
        f"</image>"
    )


def format_image_section(results: list[ImageExtractionResult]) -> str:
    """Format all extractions under one labeled heading; empty if none."""
    if not results:
        return ""
    elements = "\n\n".join(format_image_result(result) for result in results)
    return f"{IMAGE_SECTION_HEADING}\n\n{elements}"


def combine_sections(text: str, image_section: str) -> str:
    """Join converted text and the image section.

    The delimiter only appears when both parts are present.
    """
    text = text.strip()
    image_section = image_section.strip()
    if text and image_section:
        return f"{text}\n\n{SECTION_DELIMITER}\n\n{image_section}"
    return text or image_section


class MarkdownSynthesizer:
    """Build the composite artifact for a lesson."""

    def __init__(
        self,
        converter: BaseTextConverter,
        extractor: ParallelImageExtractor,
    ):
        self.converter = converter
        self.extractor = extractor

    async def convert_text(self, blocks: list[Block]) -> str:
        """Convert non-image blocks and strip any nested image markup."""
        if not blocks:
            return ""
        markdown = await self.converter.convert(blocks)
        if not markdown:
            return ""

        cleaned = strip_image_markup(markdown)
        removed = len(markdown) - len(cleaned)
        if removed > 0:
            logger.debug(f"Removed {removed} characters of image markup")
        return cleaned

    async def synthesize(self, lesson: Lesson) -> CompositeArtifact:
        """Synthesize the artifact for one lesson.

        Args:
            lesson: Lesson to synthesize

        Returns:
            CompositeArtifact with the merged text

        Raises:
            Exception: If text conversion or the extraction phase as a whole fails
        """
        image_blocks, other_blocks = partition_blocks(lesson.blocks)
        logger.info(
            f"Synthesizing {lesson.identity}: {len(image_blocks)} images, "
            f"{len(other_blocks)} other blocks"
        )

        converted = await self.convert_text(other_blocks)
        images = await self.extractor.extract(image_blocks)
        text = combine_sections(converted, format_image_section(images))

        logger.info(f"Synthesized {lesson.identity} ({len(text)} characters)")
        return CompositeArtifact(
            lesson_identity=lesson.identity,
            text=text,
            converted_text=converted,
            images=images,
            images_attempted=len(image_blocks),
        )
