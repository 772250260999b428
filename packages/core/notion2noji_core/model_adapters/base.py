"""Base model adapter interface."""

from abc import ABC, abstractmethod
from typing import Any


class BaseModelAdapter(ABC):
    """Abstract base class for model adapters."""

    @abstractmethod
    async def extract_image_content(
        self,
        image_url: str,
        context: str = "",
    ) -> str:
        """Extract structured content from an image.

        Args:
            image_url: URL of the image to analyze
            context: Optional hint about what the image is

        Returns:
            Markdown describing the image content

        Raises:
            Exception: Any failure; callers treat it as a per-image failure
        """
        pass

    @abstractmethod
    async def generate_cards(
        self,
        lesson_content: str,
    ) -> list[dict[str, Any]]:
        """Generate flashcards from a lesson artifact.

        Args:
            lesson_content: Synthesized lesson markdown

        Returns:
            List of card dictionaries with "front" and "back"
        """
        pass

    async def aclose(self) -> None:
        """Release the underlying client, if one was created."""
        return None
