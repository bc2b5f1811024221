"""Editor session: one document being edited, plus its host callbacks.

The session is the only stateful piece of the editor. It applies the pure
operations from blocks_ops, reports every change through `on_change`, and
reports focus moves through `on_focus`; the host owns persistence and the
actual caret placement. A read-only session renders the document but
ignores every mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from . import blocks_ops
from .autoformat import match_block_shortcut, match_inline_shortcut
from .blocks_models import Block, BlockType, CursorPosition, Document, InlineStyle, RichTextSpan, new_document
from .keyboard import KeyEvent, KeyOutcome, dispatch_key
from .polish import Improve, PolishBridge
from .rich_text import apply_style, text_run_before
from .toolbar import RETYPE_ACTIONS, ApplyInlineStyle, Selection, ToolbarController, ToolbarState

logger = logging.getLogger(__name__)

OnChange = Callable[[Document], None]
OnFocus = Callable[[CursorPosition], None]


class EditorSession:
    """Stateful editor for one block document.

    Example:
        session = EditorSession(blocks, on_change=save_notes)
        session.handle_key(KeyEvent("Enter", block_id=blocks[0].id))
    """

    def __init__(
        self,
        blocks: Iterable[Block] = (),
        *,
        read_only: bool = False,
        on_change: OnChange | None = None,
        on_focus: OnFocus | None = None,
        apply_inline_style: ApplyInlineStyle | None = None,
        improve: Improve | None = None,
    ) -> None:
        self._blocks: Document = new_document(blocks)
        self.read_only = read_only
        self._on_change = on_change
        self._on_focus = on_focus
        self.active_block_id: str | None = None
        self.last_focus: CursorPosition | None = None
        self.toolbar = ToolbarController(apply_inline_style)
        self.polisher = PolishBridge(self, improve) if improve is not None else None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def blocks(self) -> Document:
        return self._blocks

    def get_block(self, block_id: str) -> Block | None:
        return blocks_ops.get_block(self._blocks, block_id)

    def set_active_block(self, block_id: str | None) -> None:
        if block_id is None or self.get_block(block_id) is not None:
            self.active_block_id = block_id

    def focus(self, position: CursorPosition) -> None:
        """Ask the host to put the caret at `position`."""
        if self.get_block(position.block_id) is None:
            return
        self.active_block_id = position.block_id
        self.last_focus = position
        if self._on_focus is not None:
            self._on_focus(position)

    def _apply(self, result: blocks_ops.EditResult) -> bool:
        if result.changed:
            self._blocks = result.blocks
            if self.active_block_id is not None and self.get_block(self.active_block_id) is None:
                self.active_block_id = None
            if self._on_change is not None:
                self._on_change(self._blocks)
        if result.focus is not None:
            self.focus(result.focus)
        return result.changed

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def insert_after(self, anchor_id: str | None, block_type: BlockType = BlockType.PARAGRAPH) -> str | None:
        """Insert an empty block; returns its id, or None when read-only."""
        if self.read_only:
            return None
        result = blocks_ops.insert_after(self._blocks, anchor_id, block_type)
        self._apply(result)
        return result.block_id

    def append(self, block_type: BlockType = BlockType.PARAGRAPH) -> str | None:
        if self.read_only:
            return None
        result = blocks_ops.append(self._blocks, block_type)
        self._apply(result)
        return result.block_id

    def remove(self, block_id: str) -> bool:
        if self.read_only:
            return False
        return self._apply(blocks_ops.remove(self._blocks, block_id))

    def update_content(self, block_id: str, content: Iterable[RichTextSpan]) -> bool:
        if self.read_only:
            return False
        return self._apply(blocks_ops.update_content(self._blocks, block_id, content))

    def change_type(self, block_id: str, block_type: BlockType) -> bool:
        if self.read_only:
            return False
        return self._apply(blocks_ops.change_type(self._blocks, block_id, block_type))

    def toggle_checked(self, block_id: str) -> bool:
        if self.read_only:
            return False
        return self._apply(blocks_ops.toggle_checked(self._blocks, block_id))

    def style_range(self, block_id: str, start: int, end: int, style: InlineStyle) -> bool:
        """Toggle an inline style over part of one block."""
        if self.read_only:
            return False
        block = self.get_block(block_id)
        if block is None:
            return False
        return self._apply(
            blocks_ops.update_content(self._blocks, block_id, apply_style(block.content, start, end, style))
        )

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> KeyOutcome:
        return dispatch_key(self, event)

    def autoformat(self, block_id: str, offset: int) -> bool:
        """Apply a markdown shortcut at the caret; True if the space was consumed.

        A whole-block marker wins over an inline one.
        """
        if self.read_only:
            return False
        block = self.get_block(block_id)
        if block is None:
            return False

        target = match_block_shortcut(block.plain_text(), block.type)
        if target is not None:
            logger.debug("Autoformat block %s -> %s", block_id, target.value)
            self._apply(blocks_ops.retype_and_clear(self._blocks, block_id, target))
            return True

        run_start, run_text = text_run_before(block.content, offset)
        match = match_inline_shortcut(run_text)
        if match is None:
            return False

        logger.debug("Autoformat %s span in block %s", match.style.value, block_id)
        self._apply(
            blocks_ops.replace_range(
                self._blocks,
                block_id,
                run_start + match.start,
                run_start + match.end,
                match.fragment(),
                cursor_offset=run_start + match.cursor_after,
            )
        )
        return True

    # -------------------------------------------------------------------------
    # Selection / Toolbar
    # -------------------------------------------------------------------------

    def on_selection_change(self, selection: Selection | None) -> ToolbarState:
        return self.toolbar.on_selection_change(selection, enabled=not self.read_only)

    def toolbar_retype(self, block_type: BlockType) -> bool:
        """Retype the focused block from the toolbar, keeping its content."""
        if self.read_only or not self.toolbar.visible or block_type not in RETYPE_ACTIONS:
            return False
        if self.active_block_id is None:
            return False
        return self.change_type(self.active_block_id, block_type)

    def toolbar_style(self, style: InlineStyle) -> bool:
        if self.read_only:
            return False
        return self.toolbar.apply_style(style)

    # -------------------------------------------------------------------------
    # AI Polish
    # -------------------------------------------------------------------------

    async def polish(self, block_id: str) -> bool:
        if self.polisher is None:
            return False
        return await self.polisher.polish(block_id)
