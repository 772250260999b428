"""Lesson pipeline stages: segmentation, text conversion, image extraction, synthesis."""

from notion2noji_core.pipeline.extract_images import ParallelImageExtractor
from notion2noji_core.pipeline.markdown import BaseTextConverter, NotionMarkdownRenderer
from notion2noji_core.pipeline.segment import segment_blocks
from notion2noji_core.pipeline.synthesize import MarkdownSynthesizer

__all__ = [
    "BaseTextConverter",
    "MarkdownSynthesizer",
    "NotionMarkdownRenderer",
    "ParallelImageExtractor",
    "segment_blocks",
]
