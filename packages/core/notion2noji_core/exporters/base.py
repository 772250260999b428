"""Base card sink interface."""

from abc import ABC, abstractmethod

from notion2noji_core.schemas.cards import CardDraft, DispatchResult


class BaseCardSink(ABC):
    """Abstract destination for generated flashcards."""

    @abstractmethod
    async def add_cards(self, cards: list[CardDraft]) -> DispatchResult:
        """Add cards, counting each card's success or failure.

        A failing card must not stop the remaining cards from being sent.

        Args:
            cards: Cards to add

        Returns:
            Success and failure counts with per-card error details
        """
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        """Check the destination is reachable. Never raises."""
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        return None
