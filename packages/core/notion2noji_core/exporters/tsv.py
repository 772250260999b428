"""TSV export for Anki import."""

import csv
from io import StringIO
from pathlib import Path

from notion2noji_core.exporters.base import BaseCardSink
from notion2noji_core.schemas.cards import CardDraft, DispatchResult


def export_tsv(
    cards: list[CardDraft],
    output: str | Path | None = None,
    include_tags: bool = True,
    append: bool = False,
) -> str:
    """Export cards to TSV format for Anki import.

    Args:
        cards: Cards to export
        output: Optional output path (if None, returns string only)
        include_tags: Include tags column
        append: Append to the output file instead of overwriting it

    Returns:
        TSV content as string
    """
    buffer = StringIO()
    writer = csv.writer(buffer, delimiter="\t", quoting=csv.QUOTE_MINIMAL)

    for card in cards:
        row = [card.front, card.back]
        if include_tags and card.tags:
            row.append(" ".join(card.tags))
        writer.writerow(row)

    content = buffer.getvalue()

    if output:
        path = Path(output)
        with path.open("a" if append else "w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    return content


class TsvCardSink(BaseCardSink):
    """Append cards to a local TSV file instead of a remote service."""

    def __init__(self, path: str | Path, include_tags: bool = True):
        self.path = Path(path)
        self.include_tags = include_tags

    async def add_cards(self, cards: list[CardDraft]) -> DispatchResult:
        export_tsv(cards, self.path, include_tags=self.include_tags, append=True)
        return DispatchResult(success=len(cards), failed=0)

    async def test_connection(self) -> bool:
        return self.path.parent.is_dir()
