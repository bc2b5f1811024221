"""Editor RPC handlers - drive block editor sessions from the host UI.

The host opens a session per editable field (e.g. one task's notes) with
the field's blocks, forwards key, input and selection events, and receives
`editor/changed` and `editor/focus` notifications. Persisting the blocks
stays with the host.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Coroutine
from typing import Any

from blockpad.editor import (
    BlockType,
    Document,
    EditorSession,
    InlineStyle,
    KeyEvent,
    Selection,
    document_from_dicts,
    document_to_dicts,
    provider_improver,
)
from blockpad.editor.blocks_models import RichTextSpan
from blockpad.editor.polish import Improve
from blockpad.editor.rich_text import text
from blockpad.errors import ConfigurationError, NotFoundError, ReadOnlyError, ValidationError
from blockpad.providers import check_provider_health, get_provider_or_none

from ._base import rpc_handler

logger = logging.getLogger(__name__)

Notify = Callable[[str, dict[str, Any]], None]


def _default_improver() -> Improve | None:
    provider = get_provider_or_none()
    return provider_improver(provider) if provider is not None else None


class SessionRegistry:
    """Open editor sessions, keyed by session id.

    `notify` pushes JSON-RPC notifications to the host. `improver_factory`
    supplies the AI polish capability for new sessions (None disables it).
    """

    def __init__(
        self,
        notify: Notify | None = None,
        *,
        improver_factory: Callable[[], Improve | None] = _default_improver,
    ) -> None:
        self._notify = notify or (lambda _method, _params: None)
        self._improver_factory = improver_factory
        self._sessions: dict[str, EditorSession] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    def open(self, blocks: Document, *, read_only: bool = False, session_id: str | None = None) -> str:
        sid = session_id or uuid.uuid4().hex[:12]
        if sid in self._sessions:
            raise ValidationError("Session already open", field="session_id", value=sid)

        session = EditorSession(
            blocks,
            read_only=read_only,
            on_change=lambda doc: self._notify_open(
                sid, session, "editor/changed", {"session_id": sid, "blocks": document_to_dicts(doc)}
            ),
            on_focus=lambda pos: self._notify_open(
                sid, session, "editor/focus", {"session_id": sid, **pos.to_dict()}
            ),
            apply_inline_style=lambda style: self._style_selection(sid, style),
            improve=None if read_only else self._improver_factory(),
        )
        self._sessions[sid] = session
        logger.debug("Opened editor session %s with %d blocks", sid, len(session.blocks))
        return sid

    def get(self, session_id: str) -> EditorSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(
                f"Editor session not found: {session_id}",
                resource_type="session",
                resource_id=session_id,
            )
        return session

    def close(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]
        logger.debug("Closed editor session %s", session_id)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Run a coroutine in the background on the running loop."""
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for background work (pending polish calls) to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _notify_open(self, session_id: str, session: EditorSession, method: str, params: dict[str, Any]) -> None:
        # A closed session, or one replaced under the same id, stays silent
        if self._sessions.get(session_id) is not session:
            logger.debug("Dropped %s for closed editor session %s", method, session_id)
            return
        self._notify(method, params)

    def _style_selection(self, session_id: str, style: InlineStyle) -> None:
        # Headless stand-in for the browser's inline formatting command:
        # toggles the style over the last reported single-block selection.
        session = self._sessions.get(session_id)
        if session is None or session.toolbar.selection is None:
            return
        selected = session.toolbar.selection.single_block_range()
        if selected is None:
            logger.debug("Inline %s skipped: selection spans several blocks", style.value)
            return
        block_id, start, end = selected
        session.style_range(block_id, start, end, style)

    async def polish_and_report(self, session_id: str, session: EditorSession, block_id: str) -> None:
        applied = await session.polish(block_id)
        self._notify_open(
            session_id,
            session,
            "editor/polished",
            {"session_id": session_id, "block_id": block_id, "applied": applied},
        )


# =============================================================================
# Param Parsing
# =============================================================================


def _block_type(value: str) -> BlockType:
    try:
        return BlockType(value)
    except ValueError as e:
        raise ValidationError(f"Unknown block type: {value}", field="type", value=value) from e


def _inline_style(value: str) -> InlineStyle:
    try:
        return InlineStyle(value)
    except ValueError as e:
        raise ValidationError(f"Unknown inline style: {value}", field="style", value=value) from e


def _content(value: str | list[dict[str, Any]]) -> tuple[RichTextSpan, ...]:
    if isinstance(value, str):
        return text(value)
    if not isinstance(value, list):
        raise ValidationError("content must be a string or a list of spans", field="content")
    return tuple(RichTextSpan.from_dict(span) for span in value)


def _writable(registry: SessionRegistry, session_id: str) -> EditorSession:
    session = registry.get(session_id)
    if session.read_only:
        raise ReadOnlyError(session_id=session_id)
    return session


# =============================================================================
# Session Lifecycle Handlers
# =============================================================================


@rpc_handler("editor/open")
def handle_editor_open(
    registry: SessionRegistry,
    *,
    blocks: list[dict[str, Any]] | None = None,
    read_only: bool = False,
    session_id: str | None = None,
) -> dict[str, Any]:
    """Open an editor session over an initial block snapshot.

    An empty snapshot starts the session with one empty paragraph.
    """
    document = document_from_dicts(blocks or [])
    sid = registry.open(document, read_only=bool(read_only), session_id=session_id)
    session = registry.get(sid)
    return {
        "session_id": sid,
        "blocks": document_to_dicts(session.blocks),
        "polish_available": session.polisher is not None,
    }


@rpc_handler("editor/get")
def handle_editor_get(registry: SessionRegistry, *, session_id: str) -> dict[str, Any]:
    session = registry.get(session_id)
    return {
        "blocks": document_to_dicts(session.blocks),
        "read_only": session.read_only,
        "active_block_id": session.active_block_id,
        "toolbar": session.toolbar.to_dict(),
    }


@rpc_handler("editor/close")
def handle_editor_close(registry: SessionRegistry, *, session_id: str) -> dict[str, Any]:
    registry.close(session_id)
    return {"closed": True}


# =============================================================================
# Input Handlers
# =============================================================================


@rpc_handler("editor/key")
def handle_editor_key(registry: SessionRegistry, *, session_id: str, event: dict[str, Any]) -> dict[str, Any]:
    """Dispatch a keydown; the host must honor `prevent_default`."""
    session = registry.get(session_id)
    try:
        key_event = KeyEvent.from_dict(event)
    except KeyError as e:
        raise ValidationError(f"Key event missing {e.args[0]}", field="event") from e
    return session.handle_key(key_event).to_dict()


@rpc_handler("editor/input")
def handle_editor_input(
    registry: SessionRegistry,
    *,
    session_id: str,
    block_id: str,
    content: str | list[dict[str, Any]],
) -> dict[str, Any]:
    """Replace a block's content after the user typed into it."""
    session = _writable(registry, session_id)
    return {"changed": session.update_content(block_id, _content(content))}


@rpc_handler("editor/focus")
def handle_editor_focus(registry: SessionRegistry, *, session_id: str, block_id: str) -> dict[str, Any]:
    """Record which block holds input focus (toolbar retype targets it)."""
    session = registry.get(session_id)
    session.set_active_block(block_id)
    return {"active_block_id": session.active_block_id}


@rpc_handler("editor/selection")
def handle_editor_selection(
    registry: SessionRegistry,
    *,
    session_id: str,
    selection: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Report a selection change; returns the toolbar state."""
    session = registry.get(session_id)
    session.on_selection_change(Selection.from_dict(selection) if selection else None)
    return session.toolbar.to_dict()


# =============================================================================
# Block Operation Handlers
# =============================================================================


@rpc_handler("editor/insert")
def handle_editor_insert(
    registry: SessionRegistry,
    *,
    session_id: str,
    after_id: str | None = None,
    type: str = BlockType.PARAGRAPH.value,
) -> dict[str, Any]:
    """Insert an empty block after `after_id`, or at the end."""
    session = _writable(registry, session_id)
    block_type = _block_type(type)
    if after_id is None:
        block_id = session.append(block_type)
    else:
        block_id = session.insert_after(after_id, block_type)
    return {"block_id": block_id}


@rpc_handler("editor/remove")
def handle_editor_remove(registry: SessionRegistry, *, session_id: str, block_id: str) -> dict[str, Any]:
    session = _writable(registry, session_id)
    return {"removed": session.remove(block_id)}


@rpc_handler("editor/retype")
def handle_editor_retype(
    registry: SessionRegistry,
    *,
    session_id: str,
    block_id: str,
    type: str,
) -> dict[str, Any]:
    session = _writable(registry, session_id)
    return {"changed": session.change_type(block_id, _block_type(type))}


@rpc_handler("editor/toggle_checked")
def handle_editor_toggle_checked(registry: SessionRegistry, *, session_id: str, block_id: str) -> dict[str, Any]:
    session = _writable(registry, session_id)
    changed = session.toggle_checked(block_id)
    block = session.get_block(block_id)
    return {"changed": changed, "checked": block.checked if block else None}


# =============================================================================
# Toolbar Handlers
# =============================================================================


@rpc_handler("editor/toolbar/retype")
def handle_editor_toolbar_retype(registry: SessionRegistry, *, session_id: str, type: str) -> dict[str, Any]:
    session = registry.get(session_id)
    return {"changed": session.toolbar_retype(_block_type(type))}


@rpc_handler("editor/toolbar/style")
def handle_editor_toolbar_style(registry: SessionRegistry, *, session_id: str, style: str) -> dict[str, Any]:
    session = registry.get(session_id)
    return {"applied": session.toolbar_style(_inline_style(style))}


# =============================================================================
# AI Polish Handlers
# =============================================================================


@rpc_handler("editor/polish")
def handle_editor_polish(registry: SessionRegistry, *, session_id: str, block_id: str) -> dict[str, Any]:
    """Start polishing a block in the background.

    Returns at once; the outcome arrives as an `editor/polished`
    notification, preceded by `editor/changed` when the text was replaced.
    Must be called from a running event loop.
    """
    session = _writable(registry, session_id)
    if session.polisher is None:
        raise ConfigurationError(
            "AI polish is not available",
            setting="BLOCKPAD_POLISH_ENABLED",
            suggestion="Enable polish and make sure Ollama is reachable",
        )
    if session.get_block(block_id) is None:
        return {"started": False}

    registry.spawn(registry.polish_and_report(session_id, session, block_id))
    return {"started": True}


@rpc_handler("providers/health")
def handle_providers_health(_registry: SessionRegistry) -> dict[str, Any]:
    return check_provider_health().to_dict()


__all__ = [
    "SessionRegistry",
    "handle_editor_close",
    "handle_editor_focus",
    "handle_editor_get",
    "handle_editor_input",
    "handle_editor_insert",
    "handle_editor_key",
    "handle_editor_open",
    "handle_editor_polish",
    "handle_editor_remove",
    "handle_editor_retype",
    "handle_editor_selection",
    "handle_editor_toggle_checked",
    "handle_editor_toolbar_retype",
    "handle_editor_toolbar_style",
    "handle_providers_health",
]
