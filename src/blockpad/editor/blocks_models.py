"""Data models for the block editor.

This module defines the core data structures for Notion-style blocks:
typed blocks holding rich text spans, and the cursor position used to
report focus changes to the host.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from blockpad.errors import ValidationError


class BlockType(str, Enum):
    """Supported block types."""

    # Text blocks
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"

    # List blocks
    BULLETED_LIST = "bulleted_list"
    TO_DO = "to_do"

    # Special blocks
    CODE = "code"
    IMAGE = "image"


HEADING_TYPES = frozenset({
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.HEADING_3,
})


class InlineStyle(str, Enum):
    """Inline formatting that can be applied to a span of text."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"


def new_block_id() -> str:
    """Generate an opaque block id."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class RichTextSpan:
    """A run of text sharing one set of formatting flags.

    A block's content is a sequence of spans; concatenating their text
    gives the block's plain text.
    """

    text: str

    # Formatting flags
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False

    def has_style(self, style: InlineStyle) -> bool:
        return bool(getattr(self, style.value))

    def same_format(self, other: RichTextSpan) -> bool:
        return (
            self.bold == other.bold
            and self.italic == other.italic
            and self.underline == other.underline
            and self.strikethrough == other.strikethrough
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "text": self.text,
            "bold": self.bold,
            "italic": self.italic,
            "underline": self.underline,
            "strikethrough": self.strikethrough,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RichTextSpan:
        """Create from dictionary."""
        return cls(
            text=str(data.get("text", "")),
            bold=bool(data.get("bold", False)),
            italic=bool(data.get("italic", False)),
            underline=bool(data.get("underline", False)),
            strikethrough=bool(data.get("strikethrough", False)),
        )


@dataclass(frozen=True)
class Block:
    """One typed unit of content in a document.

    `checked` is only meaningful for to_do blocks. Blocks are immutable;
    edits produce replacement blocks that keep the same id.
    """

    id: str
    type: BlockType = BlockType.PARAGRAPH
    content: tuple[RichTextSpan, ...] = ()
    checked: bool = False

    def plain_text(self) -> str:
        """Get concatenated plain text from all spans."""
        return "".join(span.text for span in self.content)

    def is_empty(self) -> bool:
        return not self.plain_text()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "type": self.type.value,
            "content": [span.to_dict() for span in self.content],
            "checked": self.checked,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        """Create from dictionary.

        Content may be given as a list of span dicts or as a bare string.
        """
        block_type = data.get("type", BlockType.PARAGRAPH)
        try:
            block_type = BlockType(block_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown block type: {block_type}", field="type", value=block_type
            ) from e

        raw_content = data.get("content", [])
        if isinstance(raw_content, str):
            content = (RichTextSpan(raw_content),) if raw_content else ()
        else:
            content = tuple(RichTextSpan.from_dict(span) for span in raw_content)

        return cls(
            id=str(data.get("id") or new_block_id()),
            type=block_type,
            content=content,
            checked=bool(data.get("checked", False)),
        )


@dataclass(frozen=True)
class CursorPosition:
    """Where the host should put input focus: a block and a text offset."""

    block_id: str
    offset: int = 0

    @classmethod
    def at_start(cls, block: Block) -> CursorPosition:
        return cls(block.id, 0)

    @classmethod
    def at_end(cls, block: Block) -> CursorPosition:
        return cls(block.id, len(block.plain_text()))

    def to_dict(self) -> dict[str, Any]:
        return {"block_id": self.block_id, "offset": self.offset}


# Document = ordered, non-empty tuple of blocks with unique ids
Document = tuple[Block, ...]


_PLACEHOLDERS: dict[BlockType, str] = {
    BlockType.PARAGRAPH: "Type '/' for commands",
    BlockType.HEADING_1: "Heading 1",
    BlockType.HEADING_2: "Heading 2",
    BlockType.HEADING_3: "Heading 3",
}


def placeholder_for(block_type: BlockType) -> str:
    """Hint text the host shows inside an empty block."""
    return _PLACEHOLDERS.get(block_type, "")


def new_document(blocks: Iterable[Block] = ()) -> Document:
    """Build a document from an initial snapshot.

    An empty snapshot becomes a single empty paragraph so the editor always
    has somewhere to type.

    Raises:
        ValidationError: If two blocks share an id.
    """
    document = tuple(blocks)
    if not document:
        return (Block(id=new_block_id()),)

    seen: set[str] = set()
    for block in document:
        if block.id in seen:
            raise ValidationError("Duplicate block id in document", field="blocks", value=block.id)
        seen.add(block.id)
    return document


def document_from_dicts(data: Iterable[dict[str, Any]]) -> Document:
    """Build a document from JSON block dictionaries."""
    return new_document(Block.from_dict(item) for item in data)


def document_to_dicts(document: Document) -> list[dict[str, Any]]:
    return [block.to_dict() for block in document]
