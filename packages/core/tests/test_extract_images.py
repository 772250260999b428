"""Tests for concurrent image extraction."""

import asyncio

import pytest
from builders import FakeAdapter, image

from notion2noji_core.pipeline.extract_images import (
    ParallelImageExtractor,
    build_context_hint,
)


class SlowAdapter(FakeAdapter):
    """Finishes earlier images last and tracks peak concurrency."""

    def __init__(self) -> None:
        super().__init__()
        self.in_flight = 0
        self.peak = 0

    async def extract_image_content(self, image_url: str, context: str = "") -> str:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        delay = 0.03 if image_url.endswith("0.png") else 0.0
        await asyncio.sleep(delay)
        self.in_flight -= 1
        return await super().extract_image_content(image_url, context)


class TestParallelImageExtractor:
    """Tests for fan-out and failure isolation."""

    @pytest.mark.asyncio
    async def test_failures_are_dropped(self) -> None:
        """m failing images out of n leave n - m results."""
        blocks = [
            image("i0", "https://x/0.png"),
            image("i1", "https://x/fail-1.png"),
            image("i2", "https://x/2.png"),
            image("i3", "https://x/fail-3.png"),
        ]
        extractor = ParallelImageExtractor(FakeAdapter())

        results = await extractor.extract(blocks)

        assert [r.block_id for r in results] == ["i0", "i2"]
        assert [r.index for r in results] == [0, 2]

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self) -> None:
        adapter = SlowAdapter()
        blocks = [image(f"i{n}", f"https://x/{n}.png") for n in range(3)]

        results = await ParallelImageExtractor(adapter).extract(blocks)

        assert [r.block_id for r in results] == ["i0", "i1", "i2"]
        assert adapter.peak == 3

    @pytest.mark.asyncio
    async def test_concurrency_cap(self) -> None:
        adapter = SlowAdapter()
        blocks = [image(f"i{n}", f"https://x/{n}.png") for n in range(3)]

        await ParallelImageExtractor(adapter, max_concurrent=1).extract(blocks)

        assert adapter.peak == 1

    @pytest.mark.asyncio
    async def test_missing_url_is_not_dispatched(self) -> None:
        adapter = FakeAdapter()
        blocks = [image("i0"), image("i1", "https://x/1.png")]

        results = await ParallelImageExtractor(adapter).extract(blocks)

        assert [r.block_id for r in results] == ["i1"]
        assert len(adapter.image_calls) == 1

    @pytest.mark.asyncio
    async def test_context_hint_includes_caption(self) -> None:
        adapter = FakeAdapter()
        blocks = [image("i0", "https://x/0.png", caption="verbs")]

        results = await ParallelImageExtractor(adapter, context_label="Arabic").extract(
            blocks
        )

        assert adapter.image_calls[0][1] == "Arabic image 1 with caption: verbs"
        assert results[0].caption == "verbs"

    @pytest.mark.asyncio
    async def test_no_images(self) -> None:
        assert await ParallelImageExtractor(FakeAdapter()).extract([]) == []

    def test_build_context_hint_without_caption(self) -> None:
        assert build_context_hint("lesson", 0, "") == "lesson image 1"
