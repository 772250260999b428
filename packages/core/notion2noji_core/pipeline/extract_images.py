"""Concurrent content extraction for a lesson's image blocks.

Every image in the lesson is sent to the model at the same time and the
results are joined before synthesis continues. A failing image is logged and
dropped; it never cancels or fails its siblings. Results are ordered by the
image's position in the input, not by completion time.
"""

import asyncio

from notion2noji_core.model_adapters.base import BaseModelAdapter
from notion2noji_core.schemas.blocks import Block
from notion2noji_core.schemas.images import ImageExtractionResult
from notion2noji_core.utils.logging import get_logger
from notion2noji_core.utils.retry import format_exception

logger = get_logger(__name__)


def build_context_hint(label: str, index: int, caption: str) -> str:
    """Describe an image for the model, e.g. ``lesson image 2 with caption: ...``."""
    hint = f"{label} image {index + 1}"
    if caption:
        hint = f"{hint} with caption: {caption}"
    return hint


class ParallelImageExtractor:
    """Fan out image extraction calls and gather the successful results."""

    def __init__(
        self,
        adapter: BaseModelAdapter,
        context_label: str = "Lebanese Arabic lesson",
        max_concurrent: int | None = None,
    ):
        """Initialize the extractor.

        Args:
            adapter: Model adapter providing image extraction
            context_label: Prefix for the per-image context hint
            max_concurrent: Optional cap on in-flight calls; None means one
                concurrent call per image
        """
        self.adapter = adapter
        self.context_label = context_label
        self.max_concurrent = max_concurrent

    async def _extract_one(
        self,
        block: Block,
        index: int,
    ) -> ImageExtractionResult | None:
        url = block.image_url
        if not url:
            logger.warning(f"Image block {index} ({block.id}) has no URL, skipping")
            return None

        caption = block.caption
        logger.info(f"Processing image {index}: {url[:50]}...")
        try:
            content = await self.adapter.extract_image_content(
                url, build_context_hint(self.context_label, index, caption)
            )
        except Exception as e:
            logger.error(f"Error processing image {index} ({block.id}): {format_exception(e)}")
            return None

        return ImageExtractionResult(
            index=index,
            block_id=block.id,
            source_url=url,
            caption=caption,
            extracted_content=content,
        )

    async def extract(self, image_blocks: list[Block]) -> list[ImageExtractionResult]:
        """Extract content from every image block concurrently.

        Args:
            image_blocks: Image blocks in lesson order

        Returns:
            Successful results, ordered by input index
        """
        if not image_blocks:
            return []

        logger.info(f"Processing {len(image_blocks)} images in parallel...")
        semaphore = (
            asyncio.Semaphore(self.max_concurrent) if self.max_concurrent else None
        )

        async def run(block: Block, index: int) -> ImageExtractionResult | None:
            if semaphore is None:
                return await self._extract_one(block, index)
            async with semaphore:
                return await self._extract_one(block, index)

        settled = await asyncio.gather(
            *(run(block, index) for index, block in enumerate(image_blocks))
        )

        results = sorted(
            (result for result in settled if result is not None),
            key=lambda result: result.index,
        )
        logger.info(
            f"Extracted {len(results)}/{len(image_blocks)} images "
            f"({len(image_blocks) - len(results)} dropped)"
        )
        return results
