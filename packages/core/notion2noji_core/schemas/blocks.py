"""Content block schemas.

Blocks arrive from the content source as loosely typed JSON objects whose
shape depends on a free-form ``type`` string. They are normalized here into a
closed set of kinds so segmentation and text conversion can dispatch on an
enum instead of comparing strings. Unknown types are kept as ``OTHER`` with
their raw payload intact.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BlockKind(str, Enum):
    """Known block kinds.

    Values mirror the type strings reported by the Notion API.
    """

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    QUOTE = "quote"
    CALLOUT = "callout"
    CODE = "code"
    EQUATION = "equation"
    IMAGE = "image"
    EMBED = "embed"
    BOOKMARK = "bookmark"
    DIVIDER = "divider"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    TABLE = "table"
    TABLE_ROW = "table_row"
    CHILD_PAGE = "child_page"
    OTHER = "other"

    @classmethod
    def parse(cls, type_name: str | None) -> "BlockKind":
        """Map a raw type string to a kind, falling back to OTHER."""
        if not type_name:
            return cls.OTHER
        try:
            return cls(type_name)
        except ValueError:
            return cls.OTHER


HEADING_KINDS = frozenset(
    {BlockKind.HEADING_1, BlockKind.HEADING_2, BlockKind.HEADING_3}
)

TEXT_KINDS = frozenset(
    {
        BlockKind.PARAGRAPH,
        *HEADING_KINDS,
        BlockKind.BULLETED_LIST_ITEM,
        BlockKind.NUMBERED_LIST_ITEM,
        BlockKind.TO_DO,
        BlockKind.QUOTE,
    }
)

IMAGE_LIKE_KINDS = frozenset({BlockKind.IMAGE, BlockKind.EMBED})


def rich_text_to_plain(rich_text: list[dict[str, Any]] | None) -> str:
    """Join the plain_text of a rich text array.

    Args:
        rich_text: Rich text segments as returned by the source

    Returns:
        Concatenated, stripped plain text
    """
    if not rich_text or not isinstance(rich_text, list):
        return ""
    return "".join(segment.get("plain_text") or "" for segment in rich_text).strip()


class Block(BaseModel):
    """A single content block fetched from the source document."""

    id: str = Field(..., description="Source block identifier")
    kind: BlockKind = Field(..., description="Normalized block kind")
    type_name: str = Field(..., description="Raw type string reported by the source")
    payload: dict[str, Any] = Field(
        default_factory=dict, description="Kind-specific payload"
    )
    has_children: bool = Field(False, description="Source reports nested children")
    children: list["Block"] = Field(
        default_factory=list, description="Nested blocks, if fetched"
    )
    children_error: str | None = Field(
        None, description="Why nested children could not be fetched"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_notion(cls, raw: dict[str, Any]) -> "Block":
        """Build a block from a raw Notion API block object.

        Nested children may be attached under a ``children`` key by the
        source before conversion.
        """
        type_name = raw.get("type") or BlockKind.OTHER.value
        return cls(
            id=raw.get("id", ""),
            kind=BlockKind.parse(type_name),
            type_name=type_name,
            payload=raw.get(type_name) or {},
            has_children=bool(raw.get("has_children", False)),
            children=[cls.from_notion(child) for child in raw.get("children", [])],
            children_error=raw.get("children_error"),
        )

    @property
    def rich_text(self) -> list[dict[str, Any]]:
        """Rich text segments of the block, empty if the kind has none."""
        return self.payload.get("rich_text") or []

    @property
    def plain_text(self) -> str:
        """Plain text content of the block."""
        return rich_text_to_plain(self.rich_text)

    @property
    def image_url(self) -> str | None:
        """Resolvable URL of an image block (external first, then hosted file)."""
        external = self.payload.get("external") or {}
        hosted = self.payload.get("file") or {}
        return external.get("url") or hosted.get("url") or None

    @property
    def caption(self) -> str:
        """Plain text caption, if the block carries one."""
        return rich_text_to_plain(self.payload.get("caption"))

    @property
    def is_separator(self) -> bool:
        return self.kind == BlockKind.DIVIDER
