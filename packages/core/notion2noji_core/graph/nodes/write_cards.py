"""Write cards node: generate flashcard drafts from the lesson artifact."""

from collections.abc import Callable
from typing import Any

from notion2noji_core.graph.state import LessonPipelineState
from notion2noji_core.model_adapters.base import BaseModelAdapter
from notion2noji_core.schemas.cards import CardDraft, DispatchResult
from notion2noji_core.utils.logging import get_logger
from notion2noji_core.utils.retry import format_exception

logger = get_logger(__name__)


def _to_draft(card_data: dict[str, Any]) -> CardDraft:
    return CardDraft(
        front=card_data["front"],
        back=card_data["back"],
        tags=card_data.get("tags", []),
        reverse=bool(card_data.get("reverse", False)),
    )


def create_write_cards_node(
    adapter: BaseModelAdapter,
) -> Callable[[LessonPipelineState], Any]:
    """Create a write cards node with the given model adapter."""

    async def write_cards_node(state: LessonPipelineState) -> dict[str, Any]:
        artifact = state["artifact"]
        try:
            response = await adapter.generate_cards(artifact.text)
            cards = [_to_draft(card_data) for card_data in response]
        except Exception as e:
            logger.error(
                f"Error generating cards for {artifact.lesson_identity}: "
                f"{format_exception(e)}"
            )
            return {
                "errors": [f"Write cards error: {format_exception(e)}"],
                "cards": [],
                "dispatch_result": DispatchResult(),
                "current_step": "write_cards",
            }

        logger.info(f"Generated {len(cards)} cards for {artifact.lesson_identity}")
        if not cards:
            return {
                "cards": [],
                "dispatch_result": None,
                "current_step": "write_cards",
            }
        return {"cards": cards, "current_step": "write_cards"}

    return write_cards_node
