"""State passed through the per-lesson graph."""

from typing import Annotated, TypedDict

from notion2noji_core.schemas.cards import CardDraft, DispatchResult
from notion2noji_core.schemas.images import CompositeArtifact
from notion2noji_core.schemas.lessons import Lesson


def _merge_errors(existing: list[str], incoming: list[str]) -> list[str]:
    """Combine error lists, deduplicating while keeping order."""
    if not existing:
        return list(incoming or [])
    if not incoming:
        return list(existing)
    return list(dict.fromkeys([*existing, *incoming]))


def _keep_last_str(existing: str | None, incoming: str | None) -> str | None:
    """Keep the latest value for progress tracking fields."""
    return incoming if incoming else existing


class LessonPipelineState(TypedDict, total=False):
    """State for one lesson moving through synthesize, write_cards, dispatch."""

    # Input
    lesson: Lesson

    # Processing state
    artifact: CompositeArtifact
    cards: list[CardDraft]
    skipped: bool

    # Output; None means nothing was sent downstream
    dispatch_result: DispatchResult | None

    # Metadata
    current_step: Annotated[str, _keep_last_str]
    errors: Annotated[list[str], _merge_errors]
