"""Block editor core.

Typed content blocks, structural operations, markdown autoformat,
keyboard dispatch, the floating toolbar, and AI polish.

Usage:
    from blockpad.editor import EditorSession, KeyEvent

    session = EditorSession(blocks, on_change=save)
    session.handle_key(KeyEvent("Enter", block_id=blocks[0].id))
"""

from __future__ import annotations

from blockpad.editor.blocks_models import (
    Block,
    BlockType,
    CursorPosition,
    Document,
    InlineStyle,
    RichTextSpan,
    document_from_dicts,
    document_to_dicts,
    new_document,
    placeholder_for,
)
from blockpad.editor.blocks_ops import EditResult
from blockpad.editor.keyboard import KeyEvent, KeyOutcome
from blockpad.editor.polish import PolishBridge, provider_improver
from blockpad.editor.session import EditorSession
from blockpad.editor.toolbar import Rect, Selection, ToolbarController, ToolbarState

__all__ = [
    # Models
    "Block",
    "BlockType",
    "CursorPosition",
    "Document",
    "InlineStyle",
    "RichTextSpan",
    "document_from_dicts",
    "document_to_dicts",
    "new_document",
    "placeholder_for",
    # Operations
    "EditResult",
    # Input
    "KeyEvent",
    "KeyOutcome",
    # Toolbar
    "Rect",
    "Selection",
    "ToolbarController",
    "ToolbarState",
    # Session
    "EditorSession",
    "PolishBridge",
    "provider_improver",
]
