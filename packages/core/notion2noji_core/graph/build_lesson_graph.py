"""Build the per-lesson processing graph.

synthesize -> write_cards -> dispatch, with early exits when synthesis
fails, when the artifact is too short to be worth generating from, and when
generation fails or yields no cards.
"""

from typing import Any

from langgraph.graph import END, StateGraph

from notion2noji_core.config import PipelineConfig
from notion2noji_core.exporters.base import BaseCardSink
from notion2noji_core.graph.nodes import (
    create_dispatch_node,
    create_synthesize_node,
    create_write_cards_node,
)
from notion2noji_core.graph.state import LessonPipelineState
from notion2noji_core.model_adapters.base import BaseModelAdapter
from notion2noji_core.pipeline.synthesize import MarkdownSynthesizer
from notion2noji_core.utils.logging import get_logger

logger = get_logger(__name__)


def _after_synthesize(state: LessonPipelineState) -> str:
    if state.get("errors") or state.get("skipped"):
        return END
    return "write_cards"


def _after_write_cards(state: LessonPipelineState) -> str:
    if state.get("errors") or not state.get("cards"):
        return END
    return "dispatch"


def build_lesson_graph(
    synthesizer: MarkdownSynthesizer,
    adapter: BaseModelAdapter,
    sink: BaseCardSink,
    config: PipelineConfig | None = None,
) -> Any:
    """Build the per-lesson graph.

    Args:
        synthesizer: Builds the composite artifact
        adapter: Model adapter for card generation
        sink: Destination for generated cards
        config: Optional pipeline configuration

    Returns:
        Compiled graph; invoke with ``{"lesson": lesson}``
    """
    resolved_config = config or PipelineConfig()
    logger.debug(
        f"Building lesson graph (min_artifact_chars={resolved_config.min_artifact_chars})"
    )

    graph = StateGraph(LessonPipelineState)
    graph.add_node(
        "synthesize",
        create_synthesize_node(synthesizer, resolved_config.min_artifact_chars),
    )
    graph.add_node("write_cards", create_write_cards_node(adapter))
    graph.add_node("dispatch", create_dispatch_node(sink))

    graph.set_entry_point("synthesize")
    graph.add_conditional_edges(
        "synthesize", _after_synthesize, {"write_cards": "write_cards", END: END}
    )
    graph.add_conditional_edges(
        "write_cards", _after_write_cards, {"dispatch": "dispatch", END: END}
    )
    graph.add_edge("dispatch", END)

    return graph.compile()
