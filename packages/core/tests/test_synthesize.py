"""Tests for lesson synthesis."""

import pytest
from builders import FakeAdapter, heading, image, paragraph, raw_block, rich

from notion2noji_core.pipeline.extract_images import ParallelImageExtractor
from notion2noji_core.pipeline.markdown import BaseTextConverter, NotionMarkdownRenderer
from notion2noji_core.pipeline.synthesize import (
    MarkdownSynthesizer,
    combine_sections,
    format_image_result,
    partition_blocks,
    strip_image_markup,
)
from notion2noji_core.schemas.blocks import Block
from notion2noji_core.schemas.images import ImageExtractionResult
from notion2noji_core.schemas.lessons import Lesson


class BrokenConverter(BaseTextConverter):
    async def convert(self, blocks: list[Block]) -> str:
        raise RuntimeError("conversion failed")


def make_synthesizer(
    adapter: FakeAdapter | None = None,
    converter: BaseTextConverter | None = None,
) -> MarkdownSynthesizer:
    return MarkdownSynthesizer(
        converter or NotionMarkdownRenderer(),
        ParallelImageExtractor(adapter or FakeAdapter()),
    )


def make_lesson(blocks: list[Block]) -> Lesson:
    return Lesson(sequence_index=0, identity="lesson-0", blocks=blocks)


class TestHelpers:
    """Tests for the formatting helpers."""

    def test_partition_preserves_order(self) -> None:
        blocks = [
            paragraph("p1", "a"),
            image("i1", "https://x/1.png"),
            paragraph("p2", "b"),
            image("i2", "https://x/2.png"),
        ]
        images, others = partition_blocks(blocks)

        assert [b.id for b in images] == ["i1", "i2"]
        assert [b.id for b in others] == ["p1", "p2"]

    def test_strip_image_markup(self) -> None:
        markdown = "intro\n\n![cap](https://x/1.png)\n\n\n\noutro\n"
        assert strip_image_markup(markdown) == "intro\n\noutro"

    def test_strip_image_markup_with_escaped_caption(self) -> None:
        markdown = r"intro ![a \] b](https://x/1.png) outro"
        assert strip_image_markup(markdown) == "intro  outro"

    def test_format_image_result(self) -> None:
        result = ImageExtractionResult(
            index=0,
            block_id="abc",
            source_url="https://x/1.png",
            extracted_content="line one\n\nline two",
        )
        assert format_image_result(result) == (
            '<image id="abc">\n'
            "  <extracted-content>\n"
            "    line one\n"
            "\n"
            "    line two\n"
            "  </extracted-content>\n"
            "</image>"
        )

    def test_combine_sections(self) -> None:
        assert combine_sections("text", "images") == "text\n\n---\n\nimages"
        assert combine_sections("", "images") == "images"
        assert combine_sections("text", "") == "text"
        assert combine_sections("  ", "") == ""


class TestMarkdownSynthesizer:
    """Tests for building the composite artifact."""

    @pytest.mark.asyncio
    async def test_text_and_images(self) -> None:
        lesson = make_lesson(
            [
                heading("h", "Colors"),
                image("i1", "https://x/1.png"),
                paragraph("p", "ahmar is red"),
            ]
        )

        artifact = await make_synthesizer().synthesize(lesson)

        assert artifact.lesson_identity == "lesson-0"
        assert artifact.converted_text == "# Colors\n\nahmar is red"
        assert artifact.text.startswith("# Colors\n\nahmar is red\n\n---\n\n")
        assert "# Images in this Lesson" in artifact.text
        assert '<image id="i1">' in artifact.text
        assert "Content of https://x/1.png" in artifact.text
        assert artifact.images_attempted == 1

    @pytest.mark.asyncio
    async def test_partial_image_failure(self) -> None:
        """Failing images leave out their sections without failing synthesis."""
        lesson = make_lesson(
            [
                paragraph("p", "words"),
                image("i1", "https://x/1.png"),
                image("i2", "https://x/fail.png"),
                image("i3", "https://x/3.png"),
            ]
        )

        artifact = await make_synthesizer().synthesize(lesson)

        assert artifact.text.count("<image id=") == 2
        assert '<image id="i2">' not in artifact.text
        assert artifact.images_attempted == 3

    @pytest.mark.asyncio
    async def test_nested_images_are_stripped(self) -> None:
        toggle = Block.from_notion(
            raw_block(
                "t",
                "toggle",
                rich_text=rich("More"),
                children=[
                    raw_block(
                        "i",
                        "image",
                        type="external",
                        external={"url": "https://x/n.png"},
                        caption=[],
                    )
                ],
            )
        )

        artifact = await make_synthesizer().synthesize(make_lesson([toggle]))

        assert artifact.text == "More"
        assert "![" not in artifact.text

    @pytest.mark.asyncio
    async def test_nested_image_with_bracketed_caption_is_stripped(self) -> None:
        toggle = Block.from_notion(
            raw_block(
                "t",
                "toggle",
                rich_text=rich("More"),
                children=[
                    raw_block(
                        "i",
                        "image",
                        type="external",
                        external={"url": "https://x/n.png"},
                        caption=rich("see [note] here"),
                    )
                ],
            )
        )

        artifact = await make_synthesizer().synthesize(make_lesson([toggle]))

        assert artifact.text == "More"
        assert "https://x/n.png" not in artifact.text

    @pytest.mark.asyncio
    async def test_image_only_lesson_has_no_delimiter(self) -> None:
        artifact = await make_synthesizer().synthesize(
            make_lesson([image("i1", "https://x/1.png")])
        )

        assert artifact.converted_text == ""
        assert artifact.text.startswith("# Images in this Lesson")

    @pytest.mark.asyncio
    async def test_empty_lesson(self) -> None:
        artifact = await make_synthesizer().synthesize(make_lesson([]))

        assert artifact.text == ""
        assert not artifact.is_substantial(50)

    @pytest.mark.asyncio
    async def test_conversion_failure_propagates(self) -> None:
        synthesizer = make_synthesizer(converter=BrokenConverter())

        with pytest.raises(RuntimeError, match="conversion failed"):
            await synthesizer.synthesize(make_lesson([paragraph("p", "x")]))
