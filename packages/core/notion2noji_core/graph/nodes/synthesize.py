"""Synthesize node: build the composite artifact for a lesson."""

from collections.abc import Callable
from typing import Any

from notion2noji_core.graph.state import LessonPipelineState
from notion2noji_core.pipeline.synthesize import MarkdownSynthesizer
from notion2noji_core.schemas.cards import DispatchResult
from notion2noji_core.utils.logging import get_logger
from notion2noji_core.utils.retry import format_exception

logger = get_logger(__name__)


def create_synthesize_node(
    synthesizer: MarkdownSynthesizer,
    min_artifact_chars: int,
) -> Callable[[LessonPipelineState], Any]:
    """Create a synthesize node.

    Args:
        synthesizer: Synthesizer for text and image content
        min_artifact_chars: Artifacts shorter than this skip card generation

    Returns:
        Node function
    """

    async def synthesize_node(state: LessonPipelineState) -> dict[str, Any]:
        lesson = state["lesson"]
        try:
            artifact = await synthesizer.synthesize(lesson)
        except Exception as e:
            logger.error(f"Error synthesizing {lesson.identity}: {format_exception(e)}")
            return {
                "errors": [f"Synthesis error: {format_exception(e)}"],
                "cards": [],
                "dispatch_result": DispatchResult(),
                "current_step": "synthesize",
            }

        if not artifact.is_substantial(min_artifact_chars):
            logger.warning(
                f"{lesson.identity} produced no substantial content "
                f"({artifact.length} characters), skipping card generation"
            )
            return {
                "artifact": artifact,
                "skipped": True,
                "cards": [],
                "dispatch_result": None,
                "current_step": "synthesize",
            }

        return {
            "artifact": artifact,
            "skipped": False,
            "current_step": "synthesize",
        }

    return synthesize_node
