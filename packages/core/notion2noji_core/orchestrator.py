"""Batch orchestration over the lessons of one source page.

One batch: fetch all blocks, segment them into lessons, drop the lessons
already recorded in the state store, then run the remaining lessons one at a
time through the per-lesson graph and checkpoint each as soon as it finishes.
Lessons never run concurrently; only the images inside one lesson do.
"""

from typing import Any

from notion2noji_core.config import PipelineConfig
from notion2noji_core.exporters.base import BaseCardSink
from notion2noji_core.graph import build_lesson_graph
from notion2noji_core.model_adapters.base import BaseModelAdapter
from notion2noji_core.pipeline.extract_images import ParallelImageExtractor
from notion2noji_core.pipeline.markdown import BaseTextConverter, NotionMarkdownRenderer
from notion2noji_core.pipeline.segment import segment_blocks
from notion2noji_core.pipeline.synthesize import MarkdownSynthesizer
from notion2noji_core.schemas.batch import BatchSummary, LessonOutcome
from notion2noji_core.schemas.cards import DispatchResult
from notion2noji_core.schemas.lessons import Lesson
from notion2noji_core.schemas.state import ProcessingRecord
from notion2noji_core.sources.base import BaseContentSource
from notion2noji_core.state.store import ProcessingStateStore
from notion2noji_core.utils.logging import get_logger
from notion2noji_core.utils.retry import format_exception

logger = get_logger(__name__)


def build_record(
    lesson: Lesson,
    cards_generated: int,
    dispatch_result: DispatchResult | None,
) -> ProcessingRecord:
    """Derive the checkpoint record for a finished lesson."""
    added = dispatch_result.success if dispatch_result else 0
    failed = dispatch_result.failed if dispatch_result else 0
    return ProcessingRecord(
        title=lesson.title,
        block_count=lesson.block_count,
        has_images=lesson.has_images,
        has_text=lesson.has_text,
        block_types=lesson.block_types,
        cards_generated=cards_generated,
        cards_added=added,
        cards_failed=failed,
        processing_successful=dispatch_result is not None,
    )


class BatchOrchestrator:
    """Drive one batch run end to end."""

    def __init__(
        self,
        source: BaseContentSource,
        store: ProcessingStateStore,
        adapter: BaseModelAdapter,
        sink: BaseCardSink,
        config: PipelineConfig | None = None,
        converter: BaseTextConverter | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            source: Where lesson blocks come from
            store: Checkpoint store, mutated only through its own methods
            adapter: Model adapter for image extraction and card generation
            sink: Destination for generated cards
            config: Optional pipeline configuration
            converter: Text converter; defaults to the Notion markdown renderer
        """
        self.source = source
        self.store = store
        self.config = config or PipelineConfig()

        extractor = ParallelImageExtractor(
            adapter,
            context_label=self.config.image_context_label,
            max_concurrent=self.config.max_concurrent_images,
        )
        self.synthesizer = MarkdownSynthesizer(
            converter or NotionMarkdownRenderer(), extractor
        )
        self.graph = build_lesson_graph(self.synthesizer, adapter, sink, self.config)

    async def process_lesson(self, lesson: Lesson) -> LessonOutcome:
        """Run one lesson through the graph and checkpoint it.

        The lesson is checkpointed whatever happens inside the graph.
        """
        logger.info(f"Processing {lesson.identity}: {lesson.title}")
        result: dict[str, Any]
        try:
            result = await self.graph.ainvoke({"lesson": lesson})
        except Exception as e:
            logger.error(f"Lesson pipeline failed for {lesson.identity}: {format_exception(e)}")
            result = {
                "errors": [f"Pipeline error: {format_exception(e)}"],
                "dispatch_result": DispatchResult(),
            }

        artifact = result.get("artifact")
        cards = result.get("cards") or []
        dispatch_result = result.get("dispatch_result")
        errors = list(result.get("errors") or [])

        record = build_record(lesson, len(cards), dispatch_result)
        checkpointed = self.store.mark_processed(lesson.identity, record)

        return LessonOutcome(
            identity=lesson.identity,
            title=record.title,
            artifact_chars=artifact.length if artifact else 0,
            skipped=bool(result.get("skipped")),
            cards_generated=record.cards_generated,
            cards_added=record.cards_added,
            cards_failed=record.cards_failed,
            errors=errors,
            processing_successful=record.processing_successful,
            checkpointed=checkpointed,
        )

    async def run(self, root_id: str, label: str | None = None) -> BatchSummary:
        """Process every lesson under ``root_id`` that is not yet checkpointed.

        Args:
            root_id: Source page identifier
            label: Batch label recorded in the state; defaults to the config's

        Returns:
            Aggregate totals for the batch

        Raises:
            Exception: If fetching the source blocks fails
        """
        blocks = await self.source.fetch_all_blocks(root_id)
        lessons = segment_blocks(
            blocks,
            separator_kind=self.config.separator_kind,
            identity_strategy=self.config.identity_strategy,
        )
        pending = self.store.filter_unprocessed(lessons)
        logger.info(f"Found {len(lessons)} lessons, {len(pending)} not yet processed")

        if not pending:
            logger.info("All lessons have already been processed")
            return BatchSummary(lessons_found=len(lessons), no_op=True)

        self.store.start_batch(label or self.config.batch_label, len(lessons))

        summary = BatchSummary(lessons_found=len(lessons), lessons_pending=len(pending))
        for position, lesson in enumerate(pending, start=1):
            logger.info(f"Lesson {position}/{len(pending)}")
            outcome = await self.process_lesson(lesson)
            summary.outcomes.append(outcome)
            summary.lessons_processed += 1
            summary.cards_created += outcome.cards_added
            summary.errors += outcome.error_count

        self.store.complete_batch()
        logger.info(
            f"Batch complete: {summary.lessons_processed} lessons, "
            f"{summary.cards_created} cards created, {summary.errors} errors"
        )
        return summary
