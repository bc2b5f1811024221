"""Structural operations over a block document.

Every operation is a pure function: it takes a document and returns an
EditResult holding the new document, whether anything changed, and an
optional focus request for the host. Operations on an id that is not in
the document are no-ops, except insert_after which falls back to
appending. A document never loses its last block.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from .blocks_models import Block, BlockType, CursorPosition, Document, RichTextSpan, new_block_id
from .rich_text import RichText, normalize
from .rich_text import replace_range as _splice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditResult:
    """Outcome of a document operation.

    Attributes:
        blocks: The resulting document (the input document when unchanged).
        changed: Whether the document differs from the input.
        focus: Where the host should move input focus, if anywhere.
        block_id: The block created or targeted by the operation.
    """

    blocks: Document
    changed: bool = False
    focus: CursorPosition | None = None
    block_id: str | None = None


def _unchanged(blocks: Document, block_id: str | None = None) -> EditResult:
    return EditResult(blocks=blocks, changed=False, block_id=block_id)


# =============================================================================
# Lookup
# =============================================================================


def index_of(blocks: Document, block_id: str) -> int:
    """Position of `block_id` in the document, or -1."""
    for i, block in enumerate(blocks):
        if block.id == block_id:
            return i
    return -1


def get_block(blocks: Document, block_id: str) -> Block | None:
    idx = index_of(blocks, block_id)
    return blocks[idx] if idx >= 0 else None


def previous_block(blocks: Document, block_id: str) -> Block | None:
    idx = index_of(blocks, block_id)
    return blocks[idx - 1] if idx > 0 else None


def next_block(blocks: Document, block_id: str) -> Block | None:
    idx = index_of(blocks, block_id)
    if idx < 0 or idx >= len(blocks) - 1:
        return None
    return blocks[idx + 1]


def _replace_block(blocks: Document, idx: int, block: Block) -> Document:
    return blocks[:idx] + (block,) + blocks[idx + 1:]


# =============================================================================
# Insert / Remove
# =============================================================================


def insert_after(
    blocks: Document,
    anchor_id: str | None,
    block_type: BlockType = BlockType.PARAGRAPH,
    *,
    new_id: str | None = None,
) -> EditResult:
    """Insert an empty block of `block_type` right after `anchor_id`.

    If the anchor is not in the document the block is appended. Focus
    moves to the start of the new block. A `new_id` already used in the
    document is replaced by a fresh one.
    """
    if new_id is not None and index_of(blocks, new_id) >= 0:
        logger.debug("Block id %s already in use; generating a new one", new_id)
        new_id = None
    block = Block(id=new_id or new_block_id(), type=block_type)
    idx = index_of(blocks, anchor_id) if anchor_id is not None else -1
    if idx < 0:
        new_blocks = blocks + (block,)
    else:
        new_blocks = blocks[: idx + 1] + (block,) + blocks[idx + 1:]

    logger.debug("Inserted %s block %s after %s", block_type.value, block.id, anchor_id)
    return EditResult(
        blocks=new_blocks,
        changed=True,
        focus=CursorPosition.at_start(block),
        block_id=block.id,
    )


def append(
    blocks: Document,
    block_type: BlockType = BlockType.PARAGRAPH,
    *,
    new_id: str | None = None,
) -> EditResult:
    """Add an empty block at the end of the document."""
    anchor = blocks[-1].id if blocks else None
    return insert_after(blocks, anchor, block_type, new_id=new_id)


def remove(blocks: Document, block_id: str) -> EditResult:
    """Delete a block.

    The last remaining block is never removed. The removed block's content
    is discarded, not merged into its neighbour. Focus moves to the end of
    the previous block, or to the start of the block that took its place
    when the first block is removed.
    """
    if len(blocks) <= 1:
        return _unchanged(blocks, block_id)

    idx = index_of(blocks, block_id)
    if idx < 0:
        return _unchanged(blocks, block_id)

    new_blocks = blocks[:idx] + blocks[idx + 1:]
    if idx > 0:
        focus = CursorPosition.at_end(blocks[idx - 1])
    else:
        focus = CursorPosition.at_start(new_blocks[0])

    logger.debug("Removed block %s", block_id)
    return EditResult(blocks=new_blocks, changed=True, focus=focus, block_id=block_id)


# =============================================================================
# Content / Type Updates
# =============================================================================


def update_content(blocks: Document, block_id: str, content: Iterable[RichTextSpan]) -> EditResult:
    """Replace a block's content verbatim."""
    idx = index_of(blocks, block_id)
    if idx < 0:
        return _unchanged(blocks, block_id)

    new_content = tuple(content)
    block = blocks[idx]
    if block.content == new_content:
        return _unchanged(blocks, block_id)

    return EditResult(
        blocks=_replace_block(blocks, idx, replace(block, content=new_content)),
        changed=True,
        block_id=block_id,
    )


def change_type(blocks: Document, block_id: str, block_type: BlockType) -> EditResult:
    """Retype a block, keeping its content."""
    idx = index_of(blocks, block_id)
    if idx < 0 or blocks[idx].type == block_type:
        return _unchanged(blocks, block_id)

    return EditResult(
        blocks=_replace_block(blocks, idx, replace(blocks[idx], type=block_type)),
        changed=True,
        block_id=block_id,
    )


def retype_and_clear(blocks: Document, block_id: str, block_type: BlockType) -> EditResult:
    """Retype a block and empty its content in one step.

    Used when a typed marker such as "#" becomes the block's type; focus
    stays in the block at offset 0.
    """
    idx = index_of(blocks, block_id)
    if idx < 0:
        return _unchanged(blocks, block_id)

    block = replace(blocks[idx], type=block_type, content=())
    return EditResult(
        blocks=_replace_block(blocks, idx, block),
        changed=True,
        focus=CursorPosition.at_start(block),
        block_id=block_id,
    )


def toggle_checked(blocks: Document, block_id: str) -> EditResult:
    """Flip the checked flag of a to_do block; other types are left alone."""
    idx = index_of(blocks, block_id)
    if idx < 0 or blocks[idx].type != BlockType.TO_DO:
        return _unchanged(blocks, block_id)

    block = blocks[idx]
    return EditResult(
        blocks=_replace_block(blocks, idx, replace(block, checked=not block.checked)),
        changed=True,
        block_id=block_id,
    )


def replace_range(
    blocks: Document,
    block_id: str,
    start: int,
    end: int,
    fragment: RichText,
    *,
    cursor_offset: int | None = None,
) -> EditResult:
    """Splice `fragment` into a block's content over [start, end).

    When `cursor_offset` is given, focus is reported at that offset.
    """
    idx = index_of(blocks, block_id)
    if idx < 0:
        return _unchanged(blocks, block_id)

    block = blocks[idx]
    new_content = _splice(block.content, start, end, normalize(fragment))
    focus = CursorPosition(block_id, cursor_offset) if cursor_offset is not None else None
    if new_content == block.content:
        return EditResult(blocks=blocks, changed=False, focus=focus, block_id=block_id)

    return EditResult(
        blocks=_replace_block(blocks, idx, replace(block, content=new_content)),
        changed=True,
        focus=focus,
        block_id=block_id,
    )
