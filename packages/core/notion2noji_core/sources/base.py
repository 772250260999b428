"""Base content source interface."""

from abc import ABC, abstractmethod

from notion2noji_core.schemas.blocks import Block


class BaseContentSource(ABC):
    """Abstract source of ordered content blocks."""

    @abstractmethod
    async def fetch_all_blocks(self, root_id: str) -> list[Block]:
        """Fetch every top-level block under a root, in document order.

        Pagination is handled by the source.

        Args:
            root_id: Identifier of the root page

        Returns:
            Blocks in stable document order
        """
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        return None
