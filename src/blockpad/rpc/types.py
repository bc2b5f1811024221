"""JSON-RPC 2.0 message shapes for the editor kernel.

The host sends one request object per line. Replies echo the request id;
notifications pushed by the kernel (`editor/changed`, `editor/focus`,
`editor/polished`) carry a method and params but no id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from blockpad.errors import BlockpadError, get_error_code

JSON = dict[str, Any]
RequestId = str | int | None

# Standard JSON-RPC error codes; domain codes live in blockpad.errors
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class RpcError(Exception):
    """Failure reported to the host in place of a result."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def from_domain(cls, exc: BlockpadError) -> RpcError:
        """Carry a domain error over the wire with its code and details."""
        return cls(code=get_error_code(exc), message=exc.message, data=exc.to_dict())

    def to_dict(self) -> JSON:
        error: JSON = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


@dataclass(frozen=True)
class Request:
    """One decoded request line.

    `params` is kept as sent; `kwargs()` validates it when the handler is
    about to be called, so an error reply can still echo the id.
    """

    method: Any
    id: RequestId = None
    params: Any = field(default=None)

    @classmethod
    def from_dict(cls, data: JSON) -> Request:
        return cls(method=data.get("method"), id=data.get("id"), params=data.get("params"))

    @property
    def expects_reply(self) -> bool:
        return self.id is not None

    def kwargs(self) -> JSON:
        if self.params is None:
            return {}
        if not isinstance(self.params, dict):
            raise RpcError(code=INVALID_PARAMS, message="params must be an object")
        return self.params


def result_message(request_id: RequestId, result: Any) -> JSON:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def error_message(request_id: RequestId, error: RpcError) -> JSON:
    return {"jsonrpc": "2.0", "id": request_id, "error": error.to_dict()}


def notification_message(method: str, params: JSON) -> JSON:
    return {"jsonrpc": "2.0", "method": method, "params": params}
