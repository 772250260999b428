"""Batch run result schemas."""

from pydantic import BaseModel, Field


class LessonOutcome(BaseModel):
    """Result of running the pipeline over one lesson."""

    identity: str
    title: str
    artifact_chars: int = 0
    skipped: bool = Field(False, description="Artifact too short, generation skipped")
    cards_generated: int = 0
    cards_added: int = 0
    cards_failed: int = 0
    errors: list[str] = Field(default_factory=list)
    processing_successful: bool = False
    checkpointed: bool = Field(False, description="Record newly written to the store")

    @property
    def error_count(self) -> int:
        """Lesson failures plus per-card dispatch failures."""
        return len(self.errors) + self.cards_failed


class BatchSummary(BaseModel):
    """Aggregate totals for one batch run."""

    lessons_found: int = 0
    lessons_pending: int = 0
    lessons_processed: int = 0
    cards_created: int = 0
    errors: int = 0
    no_op: bool = Field(False, description="Nothing left to process")
    outcomes: list[LessonOutcome] = Field(default_factory=list)
