"""Task for running one batch over the configured Notion page."""

from __future__ import annotations

import structlog
from notion2noji_core.orchestrator import BatchOrchestrator
from notion2noji_core.schemas.batch import BatchSummary

from runner.config import Settings
from runner.tasks.helpers import (
    build_card_sink,
    build_content_source,
    build_model_adapter,
    build_pipeline_config,
    build_state_store,
)

logger = structlog.get_logger()


class ConnectivityError(Exception):
    """Raised when the flashcard service is unreachable at startup."""


async def run_batch(settings: Settings) -> BatchSummary:
    """Validate settings, check connectivity and process pending lessons.

    Raises:
        ConfigurationError: If required settings are missing
        ConnectivityError: If the flashcard service health check fails
    """
    settings.validate_required()

    store = build_state_store(settings)
    source = build_content_source(settings)
    sink = build_card_sink(settings)
    adapter = build_model_adapter(settings)

    try:
        target = settings.tsv_output or f"Noji deck {settings.noji_deck_id}"
        logger.info("health_check_started", target=target)
        if not await sink.test_connection():
            raise ConnectivityError(f"Cannot connect to {target}")

        orchestrator = BatchOrchestrator(
            source,
            store,
            adapter,
            sink,
            config=build_pipeline_config(settings),
        )
        logger.info("batch_started", page_id=settings.notion_page_id)
        summary = await orchestrator.run(settings.notion_page_id or "")
    finally:
        await source.aclose()
        await sink.aclose()
        await adapter.aclose()

    stats = store.stats()
    logger.info(
        "batch_finished",
        no_op=summary.no_op,
        lessons_processed=summary.lessons_processed,
        cards_created=summary.cards_created,
        errors=summary.errors,
        progress_percent=stats.progress_percent,
    )
    return summary
