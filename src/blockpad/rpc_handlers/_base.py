"""Shared plumbing for the editor RPC handlers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from blockpad.errors import BlockpadError
from blockpad.rpc.types import INTERNAL_ERROR, INVALID_PARAMS

from . import RpcError

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


def rpc_handler(method_name: str) -> Callable[[Handler], Handler]:
    """Register a function as the handler for `method_name`.

    Every failure leaves the wrapped handler as an RpcError:

    - RpcError passes through untouched
    - BlockpadError keeps its domain code and structured details
    - TypeError (missing/unknown keyword) and ValueError become INVALID_PARAMS
    - anything else is logged with its traceback and reported as INTERNAL_ERROR

    The method name is stored on the wrapper as `rpc_method` so the server
    can build its dispatch table from the handlers themselves.

    Usage:
        @rpc_handler("editor/get")
        def handle_editor_get(registry: SessionRegistry, *, session_id: str) -> dict:
            ...
    """

    def decorator(func: Handler) -> Handler:
        @wraps(func)
        def wrapper(registry: Any, **params: Any) -> Any:
            try:
                return func(registry, **params)
            except RpcError:
                raise
            except BlockpadError as e:
                raise RpcError.from_domain(e) from e
            except TypeError as e:
                raise RpcError(INVALID_PARAMS, f"Invalid parameter: {e}") from e
            except ValueError as e:
                raise RpcError(INVALID_PARAMS, str(e)) from e
            except Exception as e:
                logger.error("Internal error in RPC handler %s: %s", method_name, e, exc_info=True)
                raise RpcError(
                    INTERNAL_ERROR,
                    f"Internal error in {method_name}",
                    {"error_type": type(e).__name__},
                ) from e

        wrapper.rpc_method = method_name  # type: ignore[attr-defined]
        return wrapper

    return decorator
