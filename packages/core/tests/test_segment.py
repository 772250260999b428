"""Tests for lesson segmentation."""

from builders import divider, heading, image, paragraph

from notion2noji_core.pipeline.segment import segment_blocks
from notion2noji_core.schemas.lessons import IdentityStrategy


class TestSegmentBlocks:
    """Tests for splitting a block stream at dividers."""

    def test_trailing_divider_produces_no_lesson(self) -> None:
        """Content between dividers forms lessons; a trailing gap does not."""
        blocks = [
            heading("h1", "Greetings"),
            paragraph("p1", "marhaba"),
            divider("d1"),
            paragraph("p2", "kifak"),
            image("i1", "https://example.com/a.png"),
            divider("d2"),
        ]

        lessons = segment_blocks(blocks)

        assert len(lessons) == 2
        assert [b.id for b in lessons[0].blocks] == ["h1", "p1"]
        assert [b.id for b in lessons[1].blocks] == ["p2", "i1"]
        assert [lesson.identity for lesson in lessons] == ["lesson-0", "lesson-1"]

    def test_preceding_separator_ids(self) -> None:
        """Each lesson points at the divider that opened it."""
        blocks = [
            paragraph("p1", "one"),
            divider("d1"),
            paragraph("p2", "two"),
            divider("d2"),
            paragraph("p3", "three"),
        ]

        lessons = segment_blocks(blocks)

        assert [lesson.preceding_separator_id for lesson in lessons] == [
            None,
            "d1",
            "d2",
        ]

    def test_empty_gaps_are_skipped(self) -> None:
        """Leading and consecutive dividers produce no lessons."""
        blocks = [
            divider("d0"),
            paragraph("p1", "one"),
            divider("d1"),
            divider("d2"),
            paragraph("p2", "two"),
        ]

        lessons = segment_blocks(blocks)

        assert len(lessons) == 2
        assert lessons[0].preceding_separator_id == "d0"
        assert lessons[1].preceding_separator_id == "d2"
        assert [lesson.sequence_index for lesson in lessons] == [0, 1]

    def test_no_separators_yields_single_lesson(self) -> None:
        blocks = [paragraph("p1", "one"), paragraph("p2", "two")]

        lessons = segment_blocks(blocks)

        assert len(lessons) == 1
        assert lessons[0].block_count == 2

    def test_empty_input(self) -> None:
        assert segment_blocks([]) == []
        assert segment_blocks([divider("d1"), divider("d2")]) == []

    def test_segmentation_is_deterministic(self) -> None:
        blocks = [paragraph("p1", "one"), divider("d1"), paragraph("p2", "two")]

        first = segment_blocks(blocks)
        second = segment_blocks(blocks)

        assert first == second

    def test_content_identity(self) -> None:
        """Content identities survive a lesson inserted in front."""
        original = [paragraph("p1", "one"), divider("d1"), paragraph("p2", "two")]
        edited = [paragraph("p0", "new"), divider("d0"), *original]

        before = segment_blocks(original, identity_strategy=IdentityStrategy.CONTENT)
        after = segment_blocks(edited, identity_strategy=IdentityStrategy.CONTENT)

        assert before[0].identity.startswith("lesson-")
        assert before[0].identity != "lesson-0"
        assert [lesson.identity for lesson in after[1:]] == [
            lesson.identity for lesson in before
        ]
