"""UI kernel server: line-delimited JSON-RPC 2.0 over stdio.

The host UI writes one request per line on stdin and reads responses and
notifications from stdout. Requests are handled one at a time on a single
asyncio event loop; AI polish calls run as background tasks on the same
loop so they never block further input.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
import uuid
from collections.abc import Callable
from typing import Any

from .rpc.types import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    Request,
    RpcError,
    error_message,
    notification_message,
    result_message,
)
from .rpc_handlers.editor import (
    SessionRegistry,
    handle_editor_close,
    handle_editor_focus,
    handle_editor_get,
    handle_editor_input,
    handle_editor_insert,
    handle_editor_key,
    handle_editor_open,
    handle_editor_polish,
    handle_editor_remove,
    handle_editor_retype,
    handle_editor_selection,
    handle_editor_toggle_checked,
    handle_editor_toolbar_retype,
    handle_editor_toolbar_style,
    handle_providers_health,
)

logger = logging.getLogger(__name__)

_JSON = dict[str, Any]

_HANDLERS: tuple[Callable[..., Any], ...] = (
    handle_editor_open,
    handle_editor_get,
    handle_editor_close,
    handle_editor_key,
    handle_editor_input,
    handle_editor_focus,
    handle_editor_selection,
    handle_editor_insert,
    handle_editor_remove,
    handle_editor_retype,
    handle_editor_toggle_checked,
    handle_editor_toolbar_retype,
    handle_editor_toolbar_style,
    handle_editor_polish,
    handle_providers_health,
)

# method name -> handler, taken from each handler's @rpc_handler registration
METHODS: dict[str, Callable[..., Any]] = {h.rpc_method: h for h in _HANDLERS}  # type: ignore[attr-defined]


def _write(obj: Any) -> None:
    try:
        sys.stdout.write(json.dumps(obj, ensure_ascii=False) + "\n")
        sys.stdout.flush()
    except BrokenPipeError:
        # Host closed the pipe; shut down quietly
        raise SystemExit(0) from None


def _notify(method: str, params: _JSON) -> None:
    _write(notification_message(method, params))


def _handle_jsonrpc_request(registry: SessionRegistry, req: _JSON) -> _JSON | None:
    """Answer one decoded request; None for notifications from the host."""
    request = Request.from_dict(req)
    if not request.expects_reply:
        return None

    trace_id = uuid.uuid4().hex[:12]
    if request.method != "ping":
        logger.debug("RPC [%s] %s id=%s", trace_id, request.method, request.id)

    try:
        if request.method == "ping":
            return result_message(request.id, {"ok": True})

        handler = METHODS.get(request.method) if isinstance(request.method, str) else None
        if handler is None:
            raise RpcError(code=METHOD_NOT_FOUND, message=f"Method not found: {request.method}")

        return result_message(request.id, handler(registry, **request.kwargs()))

    except RpcError as e:
        logger.debug("RPC [%s] %s failed with %s: %s", trace_id, request.method, e.code, e.message)
        return error_message(request.id, e)

    except Exception as e:
        logger.error("Unhandled error [%s] in %s: %s", trace_id, request.method, e, exc_info=True)
        return error_message(request.id, RpcError(code=INTERNAL_ERROR, message="Internal error"))


async def serve_stdio(registry: SessionRegistry | None = None) -> None:
    """Serve requests from stdin until EOF, then let pending polish finish."""
    loop = asyncio.get_running_loop()
    registry = registry or SessionRegistry(notify=_notify)

    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            break

        line = line.strip()
        if not line:
            continue

        try:
            req = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Ignoring malformed JSON-RPC line")
            continue

        if not isinstance(req, dict):
            continue

        resp = _handle_jsonrpc_request(registry, req)
        if resp is not None:
            _write(resp)

    await registry.drain()


def run_stdio_server() -> None:
    """Run the UI kernel server over stdio."""
    asyncio.run(serve_stdio())


def main() -> None:
    run_stdio_server()


if __name__ == "__main__":
    main()
