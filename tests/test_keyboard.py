"""Tests for keyboard.py - key dispatch through an editor session.

These drive a full EditorSession the way the host does: one KeyEvent per
keydown, then inspect the document, the outcome, and what the host was told.
"""

from __future__ import annotations

from blockpad.editor import Block, BlockType, CursorPosition, KeyEvent, RichTextSpan
from blockpad.editor.keyboard import CONSUMED, NOT_HANDLED, KeyOutcome
from blockpad.editor.rich_text import text


def _block(block_id: str, content: str = "", block_type: BlockType = BlockType.PARAGRAPH) -> Block:
    return Block(id=block_id, type=block_type, content=text(content))


# =============================================================================
# Enter
# =============================================================================


class TestEnter:
    """Enter creates an empty paragraph after the current block."""

    def test_enter_inserts_and_focuses_new_block(self, make_session, host) -> None:
        session = make_session(_block("a", "Hello"))

        outcome = session.handle_key(KeyEvent("Enter", block_id="a", offset=5))

        assert outcome == CONSUMED
        assert len(session.blocks) == 2
        first, new = session.blocks
        assert first == _block("a", "Hello")
        assert new.type == BlockType.PARAGRAPH
        assert new.content == ()
        assert host.focus[-1] == CursorPosition(new.id, 0)
        assert host.changes[-1] == session.blocks

    def test_enter_mid_text_does_not_split(self, make_session) -> None:
        session = make_session(_block("a", "Hello"))

        session.handle_key(KeyEvent("Enter", block_id="a", offset=2))

        assert session.blocks[0].plain_text() == "Hello"
        assert session.blocks[1].plain_text() == ""

    def test_enter_in_middle_of_document(self, make_session) -> None:
        session = make_session(_block("a"), _block("b"))

        session.handle_key(KeyEvent("Enter", block_id="a"))

        ids = [b.id for b in session.blocks]
        assert ids[0] == "a"
        assert ids[2] == "b"

    def test_shift_enter_not_handled(self, make_session, host) -> None:
        session = make_session(_block("a", "Hello"))

        outcome = session.handle_key(KeyEvent("Enter", block_id="a", shift=True))

        assert outcome == NOT_HANDLED
        assert len(session.blocks) == 1
        assert host.changes == []


# =============================================================================
# Backspace
# =============================================================================


class TestBackspace:
    """Backspace removes an empty block."""

    def test_backspace_on_empty_block_removes_it(self, make_session, host) -> None:
        session = make_session(_block("a", "Hello"), _block("b"))

        outcome = session.handle_key(KeyEvent("Backspace", block_id="b"))

        assert outcome == CONSUMED
        assert session.blocks == (_block("a", "Hello"),)
        assert host.focus[-1] == CursorPosition("a", 5)

    def test_backspace_on_text_not_handled(self, make_session) -> None:
        session = make_session(_block("a", "Hello"), _block("b", "x"))

        outcome = session.handle_key(KeyEvent("Backspace", block_id="b", offset=1))

        assert outcome == NOT_HANDLED
        assert len(session.blocks) == 2

    def test_backspace_keeps_last_block(self, make_session, host) -> None:
        session = make_session(_block("a"))

        session.handle_key(KeyEvent("Backspace", block_id="a"))

        assert session.blocks == (_block("a"),)
        assert host.changes == []


# =============================================================================
# Arrows
# =============================================================================


class TestArrows:
    """Arrow keys move focus between blocks."""

    def test_arrow_down_focuses_next_block(self, make_session, host) -> None:
        session = make_session(_block("a", "one"), _block("b", "two"))

        outcome = session.handle_key(KeyEvent("ArrowDown", block_id="a", offset=2))

        assert outcome == CONSUMED
        assert host.focus[-1] == CursorPosition("b", 0)
        assert session.active_block_id == "b"

    def test_arrow_up_focuses_previous_block(self, make_session, host) -> None:
        session = make_session(_block("a", "one"), _block("b", "two"))

        outcome = session.handle_key(KeyEvent("ArrowUp", block_id="b"))

        assert outcome == CONSUMED
        assert host.focus[-1] == CursorPosition("a", 0)

    def test_arrow_up_on_first_block_not_handled(self, make_session, host) -> None:
        session = make_session(_block("a"), _block("b"))

        outcome = session.handle_key(KeyEvent("ArrowUp", block_id="a"))

        assert outcome == NOT_HANDLED
        assert host.focus == []

    def test_arrow_down_on_last_block_not_handled(self, make_session) -> None:
        session = make_session(_block("a"), _block("b"))

        assert session.handle_key(KeyEvent("ArrowDown", block_id="b")) == NOT_HANDLED

    def test_arrows_do_not_change_document(self, make_session, host) -> None:
        session = make_session(_block("a"), _block("b"))

        session.handle_key(KeyEvent("ArrowDown", block_id="a"))

        assert host.changes == []


# =============================================================================
# Space (autoformat)
# =============================================================================


class TestSpace:
    """Space triggers markdown shortcuts."""

    def test_dash_becomes_bulleted_list(self, make_session) -> None:
        session = make_session(_block("a", "-"))

        outcome = session.handle_key(KeyEvent(" ", block_id="a", offset=1))

        assert outcome == CONSUMED
        assert session.blocks[0].type == BlockType.BULLETED_LIST
        assert session.blocks[0].content == ()

    def test_hash_becomes_heading(self, make_session, host) -> None:
        session = make_session(_block("a", "#"))

        session.handle_key(KeyEvent(" ", block_id="a", offset=1))

        assert session.blocks[0].type == BlockType.HEADING_1
        assert session.blocks[0].content == ()
        assert host.focus[-1] == CursorPosition("a", 0)

    def test_brackets_become_todo(self, make_session) -> None:
        session = make_session(_block("a", "[]"))

        session.handle_key(KeyEvent(" ", block_id="a", offset=2))

        assert session.blocks[0].type == BlockType.TO_DO
        assert session.blocks[0].checked is False

    def test_bold_shortcut(self, make_session, host) -> None:
        session = make_session(_block("a", "this is **neat**"))

        outcome = session.handle_key(KeyEvent(" ", block_id="a", offset=16))

        assert outcome == CONSUMED
        assert session.blocks[0].content == (
            RichTextSpan("this is "),
            RichTextSpan("neat", bold=True),
            RichTextSpan(" "),
        )
        assert host.focus[-1] == CursorPosition("a", 13)

    def test_inline_keeps_text_after_cursor(self, make_session) -> None:
        session = make_session(_block("a", "*hi* tail"))

        session.handle_key(KeyEvent(" ", block_id="a", offset=4))

        assert session.blocks[0].content == (
            RichTextSpan("hi", italic=True),
            RichTextSpan("  tail"),
        )

    def test_inline_inside_styled_text(self, make_session) -> None:
        block = Block(id="a", content=(RichTextSpan("bold", bold=True), RichTextSpan(" ~x~")))
        session = make_session(block)

        session.handle_key(KeyEvent(" ", block_id="a", offset=8))

        assert session.blocks[0].content == (
            RichTextSpan("bold", bold=True),
            RichTextSpan(" "),
            RichTextSpan("x", strikethrough=True),
            RichTextSpan(" "),
        )

    def test_plain_space_not_handled(self, make_session, host) -> None:
        session = make_session(_block("a", "hello"))

        outcome = session.handle_key(KeyEvent(" ", block_id="a", offset=5))

        assert outcome == NOT_HANDLED
        assert host.changes == []

    def test_marker_with_text_is_not_block_shortcut(self, make_session) -> None:
        session = make_session(_block("a", "# Title"))

        outcome = session.handle_key(KeyEvent(" ", block_id="a", offset=7))

        assert outcome == NOT_HANDLED
        assert session.blocks[0].type == BlockType.PARAGRAPH


# =============================================================================
# Guards
# =============================================================================


class TestGuards:
    def test_read_only_ignores_keys(self, make_session, host) -> None:
        session = make_session(_block("a", "-"), _block("b"), read_only=True)

        for key in ("Enter", "Backspace", "ArrowDown", " "):
            block_id = "b" if key == "Backspace" else "a"
            assert session.handle_key(KeyEvent(key, block_id=block_id, offset=1)) == NOT_HANDLED

        assert len(session.blocks) == 2
        assert session.blocks[0].type == BlockType.PARAGRAPH
        assert host.changes == []
        assert host.focus == []

    def test_unknown_block(self, make_session) -> None:
        session = make_session(_block("a"))

        assert session.handle_key(KeyEvent("Enter", block_id="ghost")) == NOT_HANDLED
        assert len(session.blocks) == 1

    def test_unbound_key(self, make_session) -> None:
        session = make_session(_block("a"))

        assert session.handle_key(KeyEvent("Tab", block_id="a")) == NOT_HANDLED

    def test_key_event_from_dict(self) -> None:
        event = KeyEvent.from_dict({"key": "Enter", "block_id": "a", "shift": True})

        assert event == KeyEvent("Enter", block_id="a", offset=0, shift=True)

    def test_outcome_to_dict(self) -> None:
        assert KeyOutcome().to_dict() == {"handled": False, "prevent_default": False}
        assert CONSUMED.to_dict() == {"handled": True, "prevent_default": True}
