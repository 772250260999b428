"""Durable processing state schemas.

The state document is persisted as JSON with camelCase keys::

    {
      "version": "1.0",
      "createdAt": "...",
      "lastUpdated": "...",
      "processedLessons": {"lesson-0": {"processedAt": "...", ...}},
      "stats": {"totalLessonsProcessed": 1, "totalLessonsFound": 4, ...}
    }
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

STATE_VERSION = "1.0"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessingRecord(_CamelModel):
    """Completion record for one lesson."""

    processed_at: datetime = Field(default_factory=utc_now)
    title: str = "Unknown"
    block_count: int = 0
    has_images: bool = False
    has_text: bool = False
    block_types: list[str] = Field(default_factory=list)
    cards_generated: int = 0
    cards_added: int = 0
    cards_failed: int = 0
    processing_successful: bool = False


class BatchStats(_CamelModel):
    """Batch-level bookkeeping."""

    total_lessons_processed: int = 0
    total_lessons_found: int = 0
    last_batch_label: str | None = None
    processing_started: datetime | None = None
    processing_completed: datetime | None = None


class ProcessingState(_CamelModel):
    """The whole durable aggregate, rewritten on every mutation."""

    version: str = STATE_VERSION
    created_at: datetime = Field(default_factory=utc_now)
    last_updated: datetime = Field(default_factory=utc_now)
    processed_lessons: dict[str, ProcessingRecord] = Field(default_factory=dict)
    stats: BatchStats = Field(default_factory=BatchStats)


class StateStats(BaseModel):
    """Aggregate progress derived from the state."""

    total_processed: int
    total_found: int
    remaining: int
    progress_percent: float
    is_complete: bool
    last_batch_label: str | None = None
    processing_started: datetime | None = None
    processing_completed: datetime | None = None


class RecentLesson(BaseModel):
    """Short entry for the most recently processed lessons."""

    identity: str
    title: str
    processed_at: datetime


class StateSummary(BaseModel):
    """Stats plus the most recent lessons, for display."""

    stats: StateStats
    recent_lessons: list[RecentLesson] = Field(default_factory=list)
