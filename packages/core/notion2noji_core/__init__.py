"""notion2noji-core: Pipeline for turning Notion lesson pages into flashcards.

A source page is split into lessons at divider blocks. Each lesson's text and
the content extracted from its images are merged into one artifact, cards are
generated from it and sent to a flashcard service, and the lesson is then
checkpointed so later runs skip it.

    >>> from notion2noji_core import BatchOrchestrator, ProcessingStateStore
    >>> from notion2noji_core.state import JsonFileStateBackend
    >>> store = ProcessingStateStore(JsonFileStateBackend("lesson-state.json"))
    >>> orchestrator = BatchOrchestrator(source, store, adapter, sink)
    >>> summary = await orchestrator.run(page_id)
"""

from notion2noji_core.config import PipelineConfig
from notion2noji_core.graph import build_lesson_graph
from notion2noji_core.orchestrator import BatchOrchestrator
from notion2noji_core.pipeline import MarkdownSynthesizer, segment_blocks
from notion2noji_core.schemas.batch import BatchSummary
from notion2noji_core.schemas.blocks import Block, BlockKind
from notion2noji_core.schemas.cards import CardDraft
from notion2noji_core.schemas.lessons import Lesson
from notion2noji_core.state import ProcessingStateStore

__version__ = "0.1.0"

__all__ = [
    # Orchestration
    "BatchOrchestrator",
    "PipelineConfig",
    "build_lesson_graph",
    # Pipeline
    "MarkdownSynthesizer",
    "segment_blocks",
    # State
    "ProcessingStateStore",
    # Schemas
    "BatchSummary",
    "Block",
    "BlockKind",
    "CardDraft",
    "Lesson",
]
