from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from blockpad.editor import Block, CursorPosition, Document, EditorSession


@dataclass
class HostRecorder:
    """Collects what the editor reports to its host."""

    changes: list[Document] = field(default_factory=list)
    focus: list[CursorPosition] = field(default_factory=list)
    styles: list[str] = field(default_factory=list)

    def on_change(self, blocks: Document) -> None:
        self.changes.append(blocks)

    def on_focus(self, position: CursorPosition) -> None:
        self.focus.append(position)

    def apply_inline_style(self, style) -> None:  # noqa: ANN001
        self.styles.append(style.value)


@pytest.fixture
def host() -> HostRecorder:
    return HostRecorder()


@pytest.fixture
def make_session(host: HostRecorder):
    """Build an EditorSession wired to the recording host."""

    def _make(*blocks: Block, read_only: bool = False, improve=None) -> EditorSession:  # noqa: ANN001
        return EditorSession(
            blocks,
            read_only=read_only,
            on_change=host.on_change,
            on_focus=host.on_focus,
            apply_inline_style=host.apply_inline_style,
            improve=improve,
        )

    return _make


