"""What the editor needs from a language model backend.

AI polish only ever asks for one thing: given a system prompt and a
block's plain text, return rewritten plain text. Model listing and the
health probe back the `providers/health` RPC method.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from blockpad.errors import LLMError

__all__ = ["LLMError", "LLMProvider", "ModelInfo", "ProviderHealth"]


@dataclass
class ProviderHealth:
    """Result of probing a backend.

    Attributes:
        reachable: The server answered.
        model_count: Models installed on the server.
        error: Why the probe failed, when it did.
        current_model: Model polish will use, if known.
    """

    reachable: bool
    model_count: int = 0
    error: str | None = None
    current_model: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "reachable": self.reachable,
            "model_count": self.model_count,
            "error": self.error,
            "current_model": self.current_model,
        }


@dataclass
class ModelInfo:
    """A model installed on the backend."""

    name: str
    size_gb: float | None = None
    family: str | None = None


@runtime_checkable
class LLMProvider(Protocol):
    """A blocking text-in, text-out model backend.

    Implementations raise LLMError (or a subclass) for every failure so
    callers have one exception type to handle.
    """

    @property
    def provider_type(self) -> str: ...

    def chat_text(
        self,
        *,
        system: str,
        user: str,
        timeout_seconds: float = 60.0,
        temperature: float | None = None,
    ) -> str:
        """Return the model's reply to `user` under the `system` prompt, trimmed."""
        ...

    def list_models(self) -> list[ModelInfo]: ...

    def check_health(self) -> ProviderHealth: ...
