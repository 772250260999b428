"""Tasks that modify the processing state directly."""

from __future__ import annotations

import structlog

from runner.config import Settings
from runner.tasks.helpers import build_state_store
from runner.tasks.show_status import format_summary

logger = structlog.get_logger()


def reset_state(settings: Settings) -> str:
    """Reset the processing state and return the stats it had before."""
    store = build_state_store(settings)
    before = format_summary(store.summary())
    store.reset()
    logger.info("state_reset", state_file=settings.state_file)
    return before


def unmark_lesson(settings: Settings, identity: str) -> bool:
    """Forget one lesson so the next batch processes it again."""
    store = build_state_store(settings)
    removed = store.unmark(identity)
    logger.info("lesson_unmarked", identity=identity, removed=removed)
    return removed
