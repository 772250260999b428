"""Content sources that supply ordered blocks."""

from notion2noji_core.sources.base import BaseContentSource
from notion2noji_core.sources.notion import NotionContentSource

__all__ = ["BaseContentSource", "NotionContentSource"]
