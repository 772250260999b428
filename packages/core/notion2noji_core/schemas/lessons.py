"""Lesson schemas.

A lesson is a contiguous run of blocks between two separators. Its identity
is derived from its position in the segmentation pass so the state store can
recognize it on later runs. Inserting or reordering blocks upstream shifts
the identity of every later lesson.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notion2noji_core.schemas.blocks import (
    HEADING_KINDS,
    IMAGE_LIKE_KINDS,
    TEXT_KINDS,
    Block,
    BlockKind,
)
from notion2noji_core.utils.hashing import block_ids_hash

TITLE_MAX_CHARS = 50


class IdentityStrategy(str, Enum):
    """How lesson identities are derived.

    - POSITION: ``lesson-<sequence_index>`` (default, stable for unchanged content)
    - CONTENT: ``lesson-<hash of member block ids>``, survives upstream inserts
    """

    POSITION = "position"
    CONTENT = "content"


def lesson_identity(
    sequence_index: int,
    blocks: list[Block],
    strategy: IdentityStrategy = IdentityStrategy.POSITION,
) -> str:
    """Derive the stable identity of a lesson."""
    if strategy == IdentityStrategy.CONTENT:
        return f"lesson-{block_ids_hash(block.id for block in blocks)}"
    return f"lesson-{sequence_index}"


class Lesson(BaseModel):
    """One lesson unit produced by segmentation, with derived metadata."""

    sequence_index: int = Field(..., ge=0, description="Position among lessons (0-based)")
    identity: str = Field(..., description="Stable key used for checkpointing")
    preceding_separator_id: str | None = Field(
        None, description="Separator that closed the previous lesson"
    )
    blocks: list[Block] = Field(default_factory=list, description="Member blocks")

    model_config = ConfigDict(frozen=True)

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    @property
    def block_types(self) -> list[str]:
        """Distinct raw block types in first-seen order."""
        return list(dict.fromkeys(block.type_name for block in self.blocks))

    @property
    def has_images(self) -> bool:
        return any(block.kind in IMAGE_LIKE_KINDS for block in self.blocks)

    @property
    def has_text(self) -> bool:
        return any(block.kind in TEXT_KINDS for block in self.blocks)

    @property
    def image_blocks(self) -> list[Block]:
        return [block for block in self.blocks if block.kind == BlockKind.IMAGE]

    @property
    def text_blocks(self) -> list[Block]:
        return [block for block in self.blocks if block.kind in TEXT_KINDS]

    @property
    def title(self) -> str:
        """Human title taken from the first block.

        Headings are used verbatim, paragraphs are truncated. Anything else,
        or an empty heading/paragraph, falls back to ``Lesson <n>``.
        """
        fallback = f"Lesson {self.sequence_index + 1}"
        if not self.blocks:
            return fallback

        first = self.blocks[0]
        text = ""
        if first.kind in HEADING_KINDS:
            text = first.plain_text
        elif first.kind == BlockKind.PARAGRAPH:
            text = first.plain_text
            if len(text) > TITLE_MAX_CHARS:
                text = text[:TITLE_MAX_CHARS] + "..."
        return text or fallback

    def metadata(self) -> dict[str, Any]:
        """Summary of the lesson for logging and display."""
        return {
            "identity": self.identity,
            "sequence_index": self.sequence_index,
            "preceding_separator_id": self.preceding_separator_id,
            "block_count": self.block_count,
            "block_types": self.block_types,
            "has_images": self.has_images,
            "has_text": self.has_text,
            "title": self.title,
        }
