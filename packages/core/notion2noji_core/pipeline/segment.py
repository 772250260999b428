"""Split an ordered block stream into lessons at separator blocks."""

from collections.abc import Iterable

from notion2noji_core.schemas.blocks import Block, BlockKind
from notion2noji_core.schemas.lessons import IdentityStrategy, Lesson, lesson_identity
from notion2noji_core.utils.logging import get_logger

logger = get_logger(__name__)


def segment_blocks(
    blocks: Iterable[Block],
    separator_kind: BlockKind = BlockKind.DIVIDER,
    identity_strategy: IdentityStrategy = IdentityStrategy.POSITION,
) -> list[Lesson]:
    """Partition blocks into lessons.

    Separator blocks close the pending lesson and are not part of any lesson.
    Empty gaps (a leading separator, consecutive separators, a trailing
    separator) produce no lesson. Without separators every block lands in a
    single lesson.

    Args:
        blocks: Blocks in document order
        separator_kind: Kind of block that delimits lessons
        identity_strategy: How lesson identities are derived

    Returns:
        Lessons in document order, indexed from 0
    """
    lessons: list[Lesson] = []
    pending: list[Block] = []
    current_separator_id: str | None = None
    total = 0

    def close_lesson() -> None:
        index = len(lessons)
        lessons.append(
            Lesson(
                sequence_index=index,
                identity=lesson_identity(index, pending, identity_strategy),
                preceding_separator_id=current_separator_id,
                blocks=list(pending),
            )
        )

    for block in blocks:
        total += 1
        if block.kind != separator_kind:
            pending.append(block)
            continue

        if pending:
            close_lesson()
            pending = []
        current_separator_id = block.id

    if pending:
        close_lesson()

    logger.info(f"Created {len(lessons)} lessons from {total} blocks")
    return lessons
