"""Processing state store.

The store is the single owner of the processing state. It records which
lessons have been processed so a batch can resume after a crash and never
processes the same lesson twice. Every mutation rewrites the whole aggregate
through the backend before returning.
"""

from collections.abc import Sequence
from typing import TypeVar

from notion2noji_core.schemas.lessons import Lesson
from notion2noji_core.schemas.state import (
    ProcessingRecord,
    ProcessingState,
    RecentLesson,
    StateStats,
    StateSummary,
    utc_now,
)
from notion2noji_core.state.backends import StateBackend
from notion2noji_core.utils.logging import get_logger

logger = get_logger(__name__)

L = TypeVar("L", bound=Lesson)


class ProcessingStateStore:
    """Ledger of processed lessons backed by a durable StateBackend."""

    def __init__(self, backend: StateBackend):
        """Load existing state from the backend, or start fresh.

        Args:
            backend: Durable storage for the state aggregate
        """
        self.backend = backend
        loaded = backend.load()
        if loaded is None:
            logger.info("Creating new processing state")
            self._state = ProcessingState()
        else:
            self._state = loaded

    @property
    def state(self) -> ProcessingState:
        """A copy of the current aggregate."""
        return self._state.model_copy(deep=True)

    def _persist(self) -> None:
        """Write the whole aggregate.

        A failed write is logged and the run continues; the in-memory state
        stays ahead of the durable copy until the next successful write.
        """
        self._state.last_updated = utc_now()
        try:
            self.backend.save(self._state)
        except OSError as e:
            logger.error(f"Error saving state: {e}")
            return
        logger.debug(
            f"State saved: {self._state.stats.total_lessons_processed} lessons processed"
        )

    def is_processed(self, identity: str) -> bool:
        return identity in self._state.processed_lessons

    def mark_processed(self, identity: str, record: ProcessingRecord) -> bool:
        """Record a lesson as processed.

        The first record for an identity wins; later calls are no-ops.

        Returns:
            True if the record was written, False if already marked
        """
        if self.is_processed(identity):
            logger.warning(f"Lesson already processed: {identity}")
            return False

        self._state.processed_lessons[identity] = record.model_copy(deep=True)
        self._state.stats.total_lessons_processed += 1
        self._persist()
        logger.info(f"Lesson marked as processed: {identity}")
        return True

    def unmark(self, identity: str) -> bool:
        """Forget a lesson so the next batch processes it again.

        Returns:
            True if the lesson was marked, False otherwise
        """
        if not self.is_processed(identity):
            logger.warning(f"Lesson was not processed: {identity}")
            return False

        del self._state.processed_lessons[identity]
        self._state.stats.total_lessons_processed -= 1
        self._persist()
        logger.info(f"Lesson unmarked for reprocessing: {identity}")
        return True

    def filter_unprocessed(self, lessons: Sequence[L]) -> list[L]:
        """Lessons not yet marked, in input order."""
        return [lesson for lesson in lessons if not self.is_processed(lesson.identity)]

    def start_batch(self, label: str, total_found: int) -> None:
        """Record the start of a batch over ``total_found`` lessons."""
        stats = self._state.stats
        stats.last_batch_label = label
        stats.total_lessons_found = total_found
        stats.processing_started = utc_now()
        stats.processing_completed = None
        self._persist()
        logger.info(f'Processing started: {total_found} lessons in "{label}"')

    def complete_batch(self) -> None:
        """Record batch completion. Tolerates a missing start_batch."""
        self._state.stats.processing_completed = utc_now()
        self._persist()
        logger.info(
            f"Processing completed: {self._state.stats.total_lessons_processed} "
            f"lessons processed"
        )

    def stats(self) -> StateStats:
        """Aggregate progress counters."""
        stats = self._state.stats
        processed = stats.total_lessons_processed
        found = stats.total_lessons_found
        remaining = max(found - processed, 0)
        progress = round(processed / found * 100, 1) if found > 0 else 0.0

        return StateStats(
            total_processed=processed,
            total_found=found,
            remaining=remaining,
            progress_percent=progress,
            is_complete=remaining == 0 and found > 0,
            last_batch_label=stats.last_batch_label,
            processing_started=stats.processing_started,
            processing_completed=stats.processing_completed,
        )

    def reset(self) -> None:
        """Discard everything and persist a fresh aggregate."""
        logger.info("Resetting state...")
        self._state = ProcessingState()
        self._persist()

    def get_record(self, identity: str) -> ProcessingRecord | None:
        record = self._state.processed_lessons.get(identity)
        return record.model_copy(deep=True) if record else None

    def processed_identities(self) -> list[str]:
        return list(self._state.processed_lessons)

    def summary(self, limit: int = 3) -> StateSummary:
        """Stats plus the most recently processed lessons."""
        recent = sorted(
            self._state.processed_lessons.items(),
            key=lambda item: item[1].processed_at,
            reverse=True,
        )[:limit]
        return StateSummary(
            stats=self.stats(),
            recent_lessons=[
                RecentLesson(
                    identity=identity,
                    title=record.title,
                    processed_at=record.processed_at,
                )
                for identity, record in recent
            ],
        )
