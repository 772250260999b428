"""Data schemas for the pipeline.

This module exports the core data schemas used throughout the notion2noji
pipeline: source blocks, lessons, image extraction results, composite
artifacts, flashcards and the durable processing state.
"""

from notion2noji_core.schemas.batch import BatchSummary, LessonOutcome
from notion2noji_core.schemas.blocks import Block, BlockKind
from notion2noji_core.schemas.cards import CardDispatchError, CardDraft, DispatchResult
from notion2noji_core.schemas.images import CompositeArtifact, ImageExtractionResult
from notion2noji_core.schemas.lessons import IdentityStrategy, Lesson, lesson_identity
from notion2noji_core.schemas.state import (
    BatchStats,
    ProcessingRecord,
    ProcessingState,
    StateStats,
    StateSummary,
)

__all__ = [
    # Source content
    "Block",
    "BlockKind",
    # Lessons
    "IdentityStrategy",
    "Lesson",
    "lesson_identity",
    # Synthesis
    "CompositeArtifact",
    "ImageExtractionResult",
    # Cards
    "CardDispatchError",
    "CardDraft",
    "DispatchResult",
    # State
    "BatchStats",
    "ProcessingRecord",
    "ProcessingState",
    "StateStats",
    "StateSummary",
    # Batch results
    "BatchSummary",
    "LessonOutcome",
]
