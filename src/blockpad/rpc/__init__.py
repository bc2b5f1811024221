"""JSON-RPC types shared by the handlers and the stdio server."""

from __future__ import annotations

from blockpad.rpc.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSON,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    Request,
    RpcError,
    error_message,
    notification_message,
    result_message,
)

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "JSON",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "Request",
    "RpcError",
    "error_message",
    "notification_message",
    "result_message",
]
