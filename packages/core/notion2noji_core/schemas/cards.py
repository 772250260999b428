"""Flashcard schemas."""

from pydantic import BaseModel, Field


class CardDraft(BaseModel):
    """A generated flashcard."""

    front: str = Field(..., description="Question/prompt side (HTML allowed)")
    back: str = Field(..., description="Answer side (HTML allowed)")
    tags: list[str] = Field(default_factory=list, description="Card tags")
    reverse: bool = Field(False, description="Also create the reverse card")

    def __hash__(self) -> int:
        return hash((self.front, self.back))


class CardDispatchError(BaseModel):
    """A card the flashcard service rejected."""

    front: str = Field(..., description="Front of the rejected card")
    error: str = Field(..., description="Failure reason")


class DispatchResult(BaseModel):
    """Outcome of sending a batch of cards to the flashcard service."""

    success: int = Field(0, ge=0, description="Cards accepted")
    failed: int = Field(0, ge=0, description="Cards rejected")
    errors: list[CardDispatchError] = Field(
        default_factory=list, description="Per-card failure details"
    )
