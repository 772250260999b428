"""Dispatch node: send generated cards to the flashcard service."""

from collections.abc import Callable
from typing import Any

from notion2noji_core.exporters.base import BaseCardSink
from notion2noji_core.graph.state import LessonPipelineState
from notion2noji_core.schemas.cards import DispatchResult
from notion2noji_core.utils.logging import get_logger
from notion2noji_core.utils.retry import format_exception

logger = get_logger(__name__)


def create_dispatch_node(
    sink: BaseCardSink,
) -> Callable[[LessonPipelineState], Any]:
    """Create a dispatch node for the given card sink."""

    async def dispatch_node(state: LessonPipelineState) -> dict[str, Any]:
        cards = state.get("cards", [])
        try:
            result = await sink.add_cards(cards)
        except Exception as e:
            logger.error(f"Error dispatching cards: {format_exception(e)}")
            return {
                "errors": [f"Dispatch error: {format_exception(e)}"],
                "dispatch_result": DispatchResult(),
                "current_step": "dispatch",
            }

        return {"dispatch_result": result, "current_step": "dispatch"}

    return dispatch_node
