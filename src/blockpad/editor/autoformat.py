"""Markdown-style shortcuts typed into a block.

Both checks run when the user presses space and are pure functions over
plain text:

- Block shortcuts: the whole block text is a marker such as "#" or "[]",
  and the block becomes a heading, to_do, or bulleted_list.
- Inline shortcuts: the text just before the cursor ends with a delimited
  run such as "**word**", which becomes a styled span.

Callers run the block check first and only try inline shortcuts when it
does not fire.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .blocks_models import BlockType, InlineStyle, RichTextSpan
from .rich_text import RichText, styled

# Whole-block markers
BLOCK_SHORTCUTS: dict[str, BlockType] = {
    "#": BlockType.HEADING_1,
    "##": BlockType.HEADING_2,
    "###": BlockType.HEADING_3,
    "[]": BlockType.TO_DO,
    "-": BlockType.BULLETED_LIST,
}

# Tested in order, first match wins. Bold must precede italic because
# "**x**" also ends with a "*...*" run.
INLINE_SHORTCUTS: tuple[tuple[InlineStyle, re.Pattern[str]], ...] = (
    (InlineStyle.STRIKETHROUGH, re.compile(r"~(.+?)~$")),
    (InlineStyle.BOLD, re.compile(r"\*\*(.+?)\*\*$")),
    (InlineStyle.ITALIC, re.compile(r"\*(.+?)\*$")),
)


@dataclass(frozen=True)
class InlineMatch:
    """A delimited run found before the cursor.

    `start` and `end` are offsets into the searched text; [start, end)
    covers the markers and the inner text.
    """

    style: InlineStyle
    start: int
    end: int
    inner: str

    def fragment(self) -> RichText:
        """Replacement for the matched run: the styled text and the consumed space."""
        return (styled(self.inner, self.style), RichTextSpan(" "))

    @property
    def cursor_after(self) -> int:
        """Cursor offset (relative to the searched text) after replacement."""
        return self.start + len(self.inner) + 1


def match_block_shortcut(block_text: str, current_type: BlockType) -> BlockType | None:
    """Return the type a marker block should become, if any.

    Only exact whole-block matches count, and a block already of the
    target type is left alone.
    """
    target = BLOCK_SHORTCUTS.get(block_text)
    if target is None or target == current_type:
        return None
    return target


def match_inline_shortcut(text_before_cursor: str) -> InlineMatch | None:
    """Find a delimited run ending exactly at the cursor."""
    for style, pattern in INLINE_SHORTCUTS:
        m = pattern.search(text_before_cursor)
        if m:
            return InlineMatch(style=style, start=m.start(), end=m.end(), inner=m.group(1))
    return None
