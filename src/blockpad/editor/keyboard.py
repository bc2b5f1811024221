"""Keyboard command dispatch for the block editor.

Maps key events from the host onto session operations and focus moves.
The table is evaluated top to bottom; the first binding whose key and
condition match runs its action.

| Key        | Condition                 | Action                                  |
|------------|---------------------------|-----------------------------------------|
| Enter      | no shift                  | new empty paragraph after the block     |
| Backspace  | block is empty            | remove the block                        |
| ArrowUp    | not the first block       | focus previous block                    |
| ArrowDown  | not the last block        | focus next block                        |
| " " (space)| marker before the cursor  | autoformat, swallow the space           |

Enter never splits the block at the cursor: the new block is always empty
and the current block keeps its content.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .blocks_models import Block, CursorPosition
from .blocks_ops import next_block, previous_block

if TYPE_CHECKING:
    from .session import EditorSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    """A keydown in one block, with the caret offset at the time."""

    key: str
    block_id: str
    offset: int = 0
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KeyEvent:
        return cls(
            key=str(data["key"]),
            block_id=str(data["block_id"]),
            offset=int(data.get("offset", 0)),
            shift=bool(data.get("shift", False)),
            ctrl=bool(data.get("ctrl", False)),
            alt=bool(data.get("alt", False)),
            meta=bool(data.get("meta", False)),
        )


@dataclass(frozen=True)
class KeyOutcome:
    """What the host should do with the keystroke.

    `prevent_default` means the editor consumed the key and the host must
    not insert it or move the caret itself.
    """

    handled: bool = False
    prevent_default: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {"handled": self.handled, "prevent_default": self.prevent_default}


NOT_HANDLED = KeyOutcome()
CONSUMED = KeyOutcome(handled=True, prevent_default=True)

Condition = Callable[["EditorSession", KeyEvent, Block], bool]
Action = Callable[["EditorSession", KeyEvent, Block], bool]


@dataclass(frozen=True)
class KeyBinding:
    key: str
    when: Condition
    action: Action


# =============================================================================
# Conditions
# =============================================================================


def _no_shift(_session: EditorSession, event: KeyEvent, _block: Block) -> bool:
    return not event.shift


def _block_empty(_session: EditorSession, _event: KeyEvent, block: Block) -> bool:
    return block.is_empty()


def _has_previous(session: EditorSession, _event: KeyEvent, block: Block) -> bool:
    return previous_block(session.blocks, block.id) is not None


def _has_next(session: EditorSession, _event: KeyEvent, block: Block) -> bool:
    return next_block(session.blocks, block.id) is not None


def _always(_session: EditorSession, _event: KeyEvent, _block: Block) -> bool:
    return True


# =============================================================================
# Actions
# =============================================================================


def _new_block_after(session: EditorSession, _event: KeyEvent, block: Block) -> bool:
    session.insert_after(block.id)
    return True


def _remove_block(session: EditorSession, _event: KeyEvent, block: Block) -> bool:
    session.remove(block.id)
    return True


def _focus_previous(session: EditorSession, _event: KeyEvent, block: Block) -> bool:
    target = previous_block(session.blocks, block.id)
    if target is None:
        return False
    session.focus(CursorPosition.at_start(target))
    return True


def _focus_next(session: EditorSession, _event: KeyEvent, block: Block) -> bool:
    target = next_block(session.blocks, block.id)
    if target is None:
        return False
    session.focus(CursorPosition.at_start(target))
    return True


def _autoformat(session: EditorSession, event: KeyEvent, block: Block) -> bool:
    return session.autoformat(block.id, event.offset)


KEY_BINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding("Enter", _no_shift, _new_block_after),
    KeyBinding("Backspace", _block_empty, _remove_block),
    KeyBinding("ArrowUp", _has_previous, _focus_previous),
    KeyBinding("ArrowDown", _has_next, _focus_next),
    KeyBinding(" ", _always, _autoformat),
)


def dispatch_key(session: EditorSession, event: KeyEvent) -> KeyOutcome:
    """Run the first binding that matches `event`.

    Read-only sessions and events for unknown blocks are never handled.
    """
    if session.read_only:
        return NOT_HANDLED

    block = session.get_block(event.block_id)
    if block is None:
        logger.debug("Key %r for unknown block %s ignored", event.key, event.block_id)
        return NOT_HANDLED

    session.set_active_block(block.id)
    for binding in KEY_BINDINGS:
        if binding.key != event.key or not binding.when(session, event, block):
            continue
        if binding.action(session, event, block):
            return CONSUMED
        return NOT_HANDLED
    return NOT_HANDLED
