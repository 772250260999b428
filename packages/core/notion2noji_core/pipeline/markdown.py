"""Convert content blocks to markdown.

The renderer works on blocks whose children were already fetched by the
content source, so conversion itself never touches the network. Images are
rendered as ``![caption](url)`` like any other block; the synthesizer strips
them afterwards because image content reaches the artifact through the
extraction step instead.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from notion2noji_core.schemas.blocks import Block, BlockKind, rich_text_to_plain

LIST_KINDS = frozenset(
    {BlockKind.BULLETED_LIST_ITEM, BlockKind.NUMBERED_LIST_ITEM, BlockKind.TO_DO}
)

INDENT = "    "


class MissingChildrenError(Exception):
    """Raised when a block's nested content could not be fetched."""

    def __init__(self, block_id: str, reason: str):
        super().__init__(f"Nested content of block {block_id} is unavailable: {reason}")
        self.block_id = block_id
        self.reason = reason


class BaseTextConverter(ABC):
    """Text conversion capability used by the synthesizer."""

    @abstractmethod
    async def convert(self, blocks: list[Block]) -> str:
        """Convert blocks to markdown.

        Must be deterministic for identical input.
        """
        pass


def render_rich_text(rich_text: list[dict[str, Any]] | None) -> str:
    """Render rich text segments with their markdown annotations."""
    if not rich_text:
        return ""

    parts: list[str] = []
    for segment in rich_text:
        if segment.get("type") == "equation":
            expression = (segment.get("equation") or {}).get("expression", "")
            parts.append(f"${expression}$")
            continue

        text = segment.get("plain_text") or ""
        if not text.strip():
            parts.append(text)
            continue

        annotations = segment.get("annotations") or {}
        if annotations.get("code"):
            text = f"`{text}`"
        if annotations.get("bold"):
            text = f"**{text}**"
        if annotations.get("italic"):
            text = f"*{text}*"
        if annotations.get("strikethrough"):
            text = f"~~{text}~~"
        href = segment.get("href")
        if href:
            text = f"[{text}]({href})"
        parts.append(text)

    return "".join(parts)


def _indent(text: str) -> str:
    return "\n".join(INDENT + line if line.strip() else line for line in text.split("\n"))


def _check_children(blocks: list[Block]) -> None:
    """Refuse to convert content with holes in it."""
    for block in blocks:
        if block.children_error:
            raise MissingChildrenError(block.id, block.children_error)
        _check_children(block.children)


def escape_alt_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")


class NotionMarkdownRenderer(BaseTextConverter):
    """Render Notion blocks as markdown."""

    def __init__(self) -> None:
        self._renderers: dict[BlockKind, Callable[[Block], str]] = {
            BlockKind.PARAGRAPH: self._paragraph,
            BlockKind.HEADING_1: lambda b: f"# {render_rich_text(b.rich_text)}",
            BlockKind.HEADING_2: lambda b: f"## {render_rich_text(b.rich_text)}",
            BlockKind.HEADING_3: lambda b: f"### {render_rich_text(b.rich_text)}",
            BlockKind.QUOTE: self._quote,
            BlockKind.CALLOUT: self._callout,
            BlockKind.TOGGLE: self._toggle,
            BlockKind.CODE: self._code,
            BlockKind.EQUATION: lambda b: f"$$\n{b.payload.get('expression', '')}\n$$",
            BlockKind.IMAGE: self._image,
            BlockKind.EMBED: self._link,
            BlockKind.BOOKMARK: self._link,
            BlockKind.DIVIDER: lambda b: "---",
            BlockKind.COLUMN_LIST: self._container,
            BlockKind.COLUMN: self._container,
            BlockKind.TABLE: self._table,
            BlockKind.CHILD_PAGE: lambda b: f"**{b.payload.get('title', '')}**",
        }

    async def convert(self, blocks: list[Block]) -> str:
        _check_children(blocks)
        return self.render_blocks(blocks).strip()

    def render_blocks(self, blocks: list[Block]) -> str:
        """Render a sibling sequence of blocks.

        Consecutive list items are joined by single newlines and numbered
        items count up within their run; everything else is separated by a
        blank line.
        """
        chunks: list[str] = []
        list_run: list[str] = []
        number = 0

        def flush_list() -> None:
            nonlocal list_run, number
            if list_run:
                chunks.append("\n".join(list_run))
            list_run = []
            number = 0

        for block in blocks:
            if block.kind in LIST_KINDS:
                if block.kind == BlockKind.NUMBERED_LIST_ITEM:
                    number += 1
                list_run.append(self._list_item(block, number))
                continue

            flush_list()
            rendered = self.render_block(block)
            if rendered.strip():
                chunks.append(rendered)

        flush_list()
        return "\n\n".join(chunks)

    def render_block(self, block: Block) -> str:
        """Render a single non-list block; unknown kinds render to nothing."""
        renderer = self._renderers.get(block.kind)
        if renderer is None:
            return ""
        return renderer(block)

    def _children(self, block: Block) -> str:
        return self.render_blocks(block.children) if block.children else ""

    def _paragraph(self, block: Block) -> str:
        text = render_rich_text(block.rich_text)
        children = self._children(block)
        if children:
            return f"{text}\n\n{_indent(children)}" if text else _indent(children)
        return text

    def _list_item(self, block: Block, number: int) -> str:
        text = render_rich_text(block.rich_text)
        if block.kind == BlockKind.NUMBERED_LIST_ITEM:
            line = f"{number}. {text}"
        elif block.kind == BlockKind.TO_DO:
            mark = "x" if block.payload.get("checked") else " "
            line = f"- [{mark}] {text}"
        else:
            line = f"- {text}"

        children = self._children(block)
        if children:
            line = f"{line}\n{_indent(children)}"
        return line

    def _quote(self, block: Block) -> str:
        body = render_rich_text(block.rich_text)
        children = self._children(block)
        if children:
            body = f"{body}\n\n{children}" if body else children
        return "\n".join(f"> {line}" if line else ">" for line in body.split("\n"))

    def _callout(self, block: Block) -> str:
        icon = (block.payload.get("icon") or {}).get("emoji", "")
        body = render_rich_text(block.rich_text)
        if icon:
            body = f"{icon} {body}"
        children = self._children(block)
        if children:
            body = f"{body}\n\n{children}"
        return "\n".join(f"> {line}" if line else ">" for line in body.split("\n"))

    def _toggle(self, block: Block) -> str:
        summary = render_rich_text(block.rich_text)
        children = self._children(block)
        return f"{summary}\n\n{children}" if children else summary

    def _code(self, block: Block) -> str:
        language = block.payload.get("language", "")
        if language == "plain text":
            language = ""
        return f"```{language}\n{rich_text_to_plain(block.rich_text)}\n```"

    def _image(self, block: Block) -> str:
        url = block.image_url
        if not url:
            return ""
        return f"![{escape_alt_text(block.caption)}]({url})"

    def _link(self, block: Block) -> str:
        url = block.payload.get("url")
        if not url:
            return ""
        return f"[{block.caption or url}]({url})"

    def _container(self, block: Block) -> str:
        return self._children(block)

    def _table(self, block: Block) -> str:
        rows: list[list[str]] = []
        for row in block.children:
            if row.kind != BlockKind.TABLE_ROW:
                continue
            cells = row.payload.get("cells") or []
            rows.append([render_rich_text(cell).replace("|", "\\|") for cell in cells])
        if not rows:
            return ""

        width = max(len(row) for row in rows)
        rows = [row + [""] * (width - len(row)) for row in rows]
        lines = [f"| {' | '.join(rows[0])} |", f"|{'|'.join(['---'] * width)}|"]
        lines.extend(f"| {' | '.join(row)} |" for row in rows[1:])
        return "\n".join(lines)
