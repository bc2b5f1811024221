"""Selection tracking and the floating formatting toolbar.

The host reports every selection change as a Selection value. The
controller is a two-state machine (hidden/visible): it shows the toolbar
above a non-collapsed selection inside the editor and hides it otherwise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from blockpad.config import EDITOR

from .blocks_models import BlockType, InlineStyle

logger = logging.getLogger(__name__)

# Block types offered by the toolbar, in display order
RETYPE_ACTIONS: tuple[BlockType, ...] = (
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.HEADING_3,
    BlockType.BULLETED_LIST,
)

# Inline styles offered by the toolbar; applied by the host to the live selection
STYLE_ACTIONS: tuple[InlineStyle, ...] = (
    InlineStyle.BOLD,
    InlineStyle.ITALIC,
    InlineStyle.UNDERLINE,
)

ApplyInlineStyle = Callable[[InlineStyle], None]


@dataclass(frozen=True)
class Rect:
    """Bounding box in host viewport coordinates."""

    top: float
    left: float
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rect:
        return cls(
            top=float(data.get("top", 0.0)),
            left=float(data.get("left", 0.0)),
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
        )


@dataclass(frozen=True)
class Selection:
    """A text selection as reported by the host.

    Attributes:
        anchor_block_id: Block where the selection started (None if nothing is selected).
        anchor_offset: Text offset of the anchor inside its block.
        focus_block_id: Block where the selection ends.
        focus_offset: Text offset of the focus inside its block.
        contained: Whether the selection lies inside the editor.
        bounds: Bounding box of the selected range.
    """

    anchor_block_id: str | None
    anchor_offset: int = 0
    focus_block_id: str | None = None
    focus_offset: int = 0
    contained: bool = True
    bounds: Rect | None = None

    @property
    def collapsed(self) -> bool:
        if self.anchor_block_id is None:
            return True
        focus_block = self.focus_block_id or self.anchor_block_id
        return focus_block == self.anchor_block_id and self.focus_offset == self.anchor_offset

    def single_block_range(self) -> tuple[str, int, int] | None:
        """(block_id, start, end) when the selection stays inside one block."""
        if self.collapsed or self.anchor_block_id is None:
            return None
        if self.focus_block_id not in (None, self.anchor_block_id):
            return None
        start, end = sorted((self.anchor_offset, self.focus_offset))
        return self.anchor_block_id, start, end

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Selection:
        bounds = data.get("bounds")
        anchor_offset = int(data.get("anchor_offset", 0))
        return cls(
            anchor_block_id=data.get("anchor_block_id"),
            anchor_offset=anchor_offset,
            focus_block_id=data.get("focus_block_id"),
            focus_offset=int(data.get("focus_offset", anchor_offset)),
            contained=bool(data.get("contained", True)),
            bounds=Rect.from_dict(bounds) if isinstance(bounds, dict) else None,
        )


class ToolbarState(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


@dataclass(frozen=True)
class ToolbarPosition:
    top: float
    left: float

    def to_dict(self) -> dict[str, float]:
        return {"top": self.top, "left": self.left}


class ToolbarController:
    """Show/hide state and actions of the floating toolbar.

    Retype actions are carried out by the owning session on the focused
    block. Inline style actions are handed to the host's
    `apply_inline_style` capability, which formats the live selection.
    """

    def __init__(self, apply_inline_style: ApplyInlineStyle | None = None) -> None:
        self._apply_inline_style = apply_inline_style
        self.state = ToolbarState.HIDDEN
        self.position: ToolbarPosition | None = None
        self.selection: Selection | None = None

    @property
    def visible(self) -> bool:
        return self.state == ToolbarState.VISIBLE

    def on_selection_change(self, selection: Selection | None, *, enabled: bool = True) -> ToolbarState:
        """Update state from the latest selection."""
        self.selection = selection
        if not enabled or selection is None or selection.collapsed or not selection.contained:
            self.hide()
            return self.state

        # Without bounds the host places the toolbar itself
        bounds = selection.bounds
        self.position = None if bounds is None else ToolbarPosition(
            top=bounds.top - EDITOR.TOOLBAR_OFFSET_PX,
            left=bounds.left,
        )
        self.state = ToolbarState.VISIBLE
        return self.state

    def hide(self) -> None:
        self.state = ToolbarState.HIDDEN
        self.position = None

    def apply_style(self, style: InlineStyle) -> bool:
        """Delegate an inline style to the host; False when it cannot run."""
        if not self.visible or style not in STYLE_ACTIONS:
            return False
        if self._apply_inline_style is None:
            logger.debug("No inline style capability; %s ignored", style.value)
            return False
        self._apply_inline_style(style)
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "position": self.position.to_dict() if self.position else None,
            "retype_actions": [t.value for t in RETYPE_ACTIONS] if self.visible else [],
            "style_actions": [s.value for s in STYLE_ACTIONS] if self.visible else [],
        }
