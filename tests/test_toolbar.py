"""Tests for toolbar.py - selection tracking and the floating toolbar."""

from __future__ import annotations

from blockpad.editor import Block, BlockType, InlineStyle, Rect, RichTextSpan, Selection, ToolbarController, ToolbarState
from blockpad.editor.rich_text import text


def _block(block_id: str, content: str = "", block_type: BlockType = BlockType.PARAGRAPH) -> Block:
    return Block(id=block_id, type=block_type, content=text(content))


def _range(block_id: str = "a", start: int = 0, end: int = 5, *, top: float = 200.0, left: float = 40.0) -> Selection:
    return Selection(
        anchor_block_id=block_id,
        anchor_offset=start,
        focus_block_id=block_id,
        focus_offset=end,
        bounds=Rect(top=top, left=left, width=80.0, height=18.0),
    )


# =============================================================================
# Visibility
# =============================================================================


class TestVisibility:
    """Test the hidden/visible state machine."""

    def test_starts_hidden(self) -> None:
        toolbar = ToolbarController()

        assert toolbar.state == ToolbarState.HIDDEN
        assert toolbar.position is None

    def test_range_selection_shows_above_bounds(self) -> None:
        toolbar = ToolbarController()

        state = toolbar.on_selection_change(_range(top=200.0, left=40.0))

        assert state == ToolbarState.VISIBLE
        assert toolbar.position is not None
        assert toolbar.position.top == 155.0
        assert toolbar.position.left == 40.0

    def test_collapsed_selection_hides(self) -> None:
        toolbar = ToolbarController()
        toolbar.on_selection_change(_range())

        toolbar.on_selection_change(_range(start=3, end=3))

        assert toolbar.state == ToolbarState.HIDDEN
        assert toolbar.position is None

    def test_no_selection_hides(self) -> None:
        toolbar = ToolbarController()
        toolbar.on_selection_change(_range())

        assert toolbar.on_selection_change(None) == ToolbarState.HIDDEN

    def test_selection_outside_editor_hides(self) -> None:
        toolbar = ToolbarController()
        outside = Selection(anchor_block_id="a", anchor_offset=0, focus_offset=4, contained=False)

        assert toolbar.on_selection_change(outside) == ToolbarState.HIDDEN

    def test_cross_block_selection_shows(self) -> None:
        toolbar = ToolbarController()
        selection = Selection(anchor_block_id="a", anchor_offset=2, focus_block_id="b", focus_offset=2)

        assert toolbar.on_selection_change(selection) == ToolbarState.VISIBLE
        assert selection.single_block_range() is None

    def test_moving_selection_follows_bounds(self) -> None:
        toolbar = ToolbarController()
        toolbar.on_selection_change(_range(top=100.0))
        toolbar.on_selection_change(_range(top=300.0, left=12.0))

        assert toolbar.position is not None
        assert toolbar.position.to_dict() == {"top": 255.0, "left": 12.0}

    def test_range_without_bounds_has_no_position(self) -> None:
        toolbar = ToolbarController()
        toolbar.on_selection_change(_range(top=100.0))

        state = toolbar.on_selection_change(Selection(anchor_block_id="a", anchor_offset=0, focus_offset=4))

        assert state == ToolbarState.VISIBLE
        assert toolbar.position is None
        assert toolbar.to_dict()["position"] is None

    def test_to_dict_lists_actions_when_visible(self) -> None:
        toolbar = ToolbarController()
        toolbar.on_selection_change(_range())

        data = toolbar.to_dict()

        assert data["state"] == "visible"
        assert data["retype_actions"] == ["heading_1", "heading_2", "heading_3", "bulleted_list"]
        assert data["style_actions"] == ["bold", "italic", "underline"]

    def test_to_dict_hidden(self) -> None:
        assert ToolbarController().to_dict() == {
            "state": "hidden",
            "position": None,
            "retype_actions": [],
            "style_actions": [],
        }


class TestSelection:
    def test_single_block_range_is_ordered(self) -> None:
        backwards = Selection(anchor_block_id="a", anchor_offset=6, focus_block_id="a", focus_offset=1)

        assert backwards.single_block_range() == ("a", 1, 6)

    def test_from_dict(self) -> None:
        selection = Selection.from_dict(
            {
                "anchor_block_id": "a",
                "anchor_offset": 1,
                "focus_offset": 3,
                "bounds": {"top": 10, "left": 5},
            }
        )

        assert selection.collapsed is False
        assert selection.bounds == Rect(top=10.0, left=5.0)

    def test_from_dict_caret_without_focus_offset_is_collapsed(self) -> None:
        caret = Selection.from_dict({"anchor_block_id": "a", "anchor_offset": 4})

        assert caret.focus_offset == 4
        assert caret.collapsed is True
        assert ToolbarController().on_selection_change(caret) == ToolbarState.HIDDEN


# =============================================================================
# Actions through a session
# =============================================================================


class TestToolbarActions:
    """Retype and inline style actions."""

    def test_retype_focused_block_keeps_content(self, make_session) -> None:
        session = make_session(_block("a", "Title"), _block("b", "body"))
        session.set_active_block("a")
        session.on_selection_change(_range("a"))

        assert session.toolbar_retype(BlockType.HEADING_2) is True
        assert session.blocks[0].type == BlockType.HEADING_2
        assert session.blocks[0].plain_text() == "Title"
        assert session.blocks[1].type == BlockType.PARAGRAPH

    def test_retype_requires_visible_toolbar(self, make_session) -> None:
        session = make_session(_block("a", "Title"))
        session.set_active_block("a")

        assert session.toolbar_retype(BlockType.HEADING_1) is False
        assert session.blocks[0].type == BlockType.PARAGRAPH

    def test_retype_rejects_types_not_offered(self, make_session) -> None:
        session = make_session(_block("a", "Title"))
        session.set_active_block("a")
        session.on_selection_change(_range("a"))

        assert session.toolbar_retype(BlockType.CODE) is False

    def test_retype_without_focused_block(self, make_session) -> None:
        session = make_session(_block("a", "Title"))
        session.on_selection_change(_range("a"))

        assert session.toolbar_retype(BlockType.HEADING_1) is False

    def test_style_delegates_to_host(self, make_session, host) -> None:
        session = make_session(_block("a", "Hello"))
        session.on_selection_change(_range("a"))

        assert session.toolbar_style(InlineStyle.BOLD) is True
        assert host.styles == ["bold"]
        assert host.changes == []

    def test_style_not_offered(self, make_session, host) -> None:
        session = make_session(_block("a", "Hello"))
        session.on_selection_change(_range("a"))

        assert session.toolbar_style(InlineStyle.STRIKETHROUGH) is False
        assert host.styles == []

    def test_style_while_hidden(self, make_session, host) -> None:
        session = make_session(_block("a", "Hello"))

        assert session.toolbar_style(InlineStyle.ITALIC) is False
        assert host.styles == []

    def test_style_without_capability(self) -> None:
        toolbar = ToolbarController()
        toolbar.on_selection_change(_range())

        assert toolbar.apply_style(InlineStyle.BOLD) is False

    def test_read_only_never_shows(self, make_session) -> None:
        session = make_session(_block("a", "Hello"), read_only=True)

        assert session.on_selection_change(_range("a")) == ToolbarState.HIDDEN
        assert session.toolbar_retype(BlockType.HEADING_1) is False

    def test_style_range(self, make_session, host) -> None:
        session = make_session(_block("a", "Hello world"))

        assert session.style_range("a", 0, 5, InlineStyle.UNDERLINE) is True
        assert session.blocks[0].content == (
            RichTextSpan("Hello", underline=True),
            RichTextSpan(" world"),
        )
        assert len(host.changes) == 1
