"""blockpad error hierarchy.

The editing core never raises for an unknown block id or for removing the
last block; those resolve as no-ops. Errors exist for the edges of the
kernel:

- ValidationError: malformed snapshots, key events, or params from the host
- NotFoundError: an editor session id that is not open
- ReadOnlyError: a mutating method sent to a read-only session
- LLMError and subclasses: the AI polish backend failed
- ConfigurationError: a feature is switched off or misconfigured

Each error renders to a dict for the `data` member of a JSON-RPC error and
maps to a code through ERROR_CODES.

Usage:
    from blockpad.errors import ValidationError

    if not isinstance(blocks, list):
        raise ValidationError("blocks must be a list", field="blocks")
"""

from __future__ import annotations

from typing import Any

_MAX_VALUE_LEN = 100


def _details(**items: Any) -> dict[str, Any]:
    """Keep only the details that were actually given."""
    return {key: value for key, value in items.items() if value is not None}


def _truncate(value: str, max_len: int = _MAX_VALUE_LEN) -> str:
    """Clip echoed user input so errors and logs stay small."""
    return value if len(value) <= max_len else value[:max_len] + "..."


# =============================================================================
# Base
# =============================================================================


class BlockpadError(Exception):
    """Base class for errors the kernel reports to the host.

    Attributes:
        message: Text shown to the user or logged
        recoverable: True when retrying the same call may succeed
        context: Extra details sent along with the error
    """

    kind = "blockpad"

    def __init__(
        self,
        message: str,
        *,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.context = _details(**(context or {}))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "message": self.message, "recoverable": self.recoverable, **self.context}


# =============================================================================
# Host Input Errors
# =============================================================================


class ValidationError(BlockpadError):
    """The host sent something the editor cannot accept.

    Example:
        raise ValidationError("Duplicate block id in document", field="blocks", value=block_id)
    """

    kind = "validation"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
    ) -> None:
        super().__init__(
            message,
            context={
                "field": field,
                "constraint": constraint,
                "value": _truncate(str(value)) if value is not None else None,
            },
        )
        self.field = field
        self.constraint = constraint


class NotFoundError(BlockpadError):
    """A session (or other addressed resource) does not exist."""

    kind = "not_found"

    def __init__(self, message: str, *, resource_type: str | None = None, resource_id: str | None = None) -> None:
        super().__init__(message, context={"resource_type": resource_type, "resource_id": resource_id})
        self.resource_type = resource_type
        self.resource_id = resource_id


class ReadOnlyError(BlockpadError):
    """A mutation was requested on a read-only editor session."""

    kind = "read_only"

    def __init__(self, message: str = "Editor is read-only", *, session_id: str | None = None) -> None:
        super().__init__(message, context={"session_id": session_id})
        self.session_id = session_id


# =============================================================================
# AI Polish Backend Errors
# =============================================================================


class LLMError(BlockpadError):
    """The language model backend failed to produce a rewrite."""

    kind = "llm"

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        model: str | None = None,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            recoverable=recoverable,
            context={"provider": provider, "model": model, **(context or {})},
        )
        self.provider = provider
        self.model = model


class LLMConnectionError(LLMError):
    """The backend server could not be reached; worth retrying later."""

    kind = "llm_connection"

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        url: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider, recoverable=True, context={"url": url, "suggestion": suggestion})


class LLMTimeoutError(LLMError):
    """The backend did not answer within the timeout."""

    kind = "llm_timeout"

    def __init__(self, message: str, *, provider: str | None = None, timeout_seconds: float | None = None) -> None:
        super().__init__(message, provider=provider, recoverable=True, context={"timeout_seconds": timeout_seconds})


class LLMModelError(LLMError):
    """The configured model is missing or unusable."""

    kind = "llm_model"

    def __init__(self, message: str, *, model: str | None = None, reason: str | None = None) -> None:
        super().__init__(message, model=model, context={"reason": reason})


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(BlockpadError):
    """A feature is disabled or its settings are wrong."""

    kind = "configuration"

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        expected: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message, context={"setting": setting, "expected": expected, "suggestion": suggestion})


# =============================================================================
# JSON-RPC Codes
# =============================================================================

# Server-defined range (-32000..-32099); standard codes live in blockpad.rpc.types
ERROR_CODES: dict[type[BlockpadError], int] = {
    ValidationError: -32000,
    ReadOnlyError: -32002,
    NotFoundError: -32003,
    LLMError: -32010,
    LLMConnectionError: -32011,
    LLMTimeoutError: -32012,
    LLMModelError: -32013,
    ConfigurationError: -32030,
}


def get_error_code(exc: BlockpadError) -> int:
    """JSON-RPC code for a domain error, via its nearest mapped class."""
    for cls in type(exc).__mro__:
        code = ERROR_CODES.get(cls)
        if code is not None:
            return code
    return -32603
