"""LLM Providers - backend for the editor's AI polish.

Usage:
    from blockpad.providers import get_provider

    provider = get_provider()
    polished = provider.chat_text(system="Improve this text.", user=text)
"""

from __future__ import annotations

# Base types
from blockpad.providers.base import (
    LLMError,
    LLMProvider,
    ModelInfo,
    ProviderHealth,
)

# Factory functions
from blockpad.providers.factory import (
    check_provider_health,
    get_provider,
    get_provider_or_none,
)

# Provider implementations
from blockpad.providers.ollama import OllamaProvider

__all__ = [
    # Base types
    "LLMError",
    "LLMProvider",
    "ModelInfo",
    "ProviderHealth",
    # Providers
    "OllamaProvider",
    # Factory
    "check_provider_health",
    "get_provider",
    "get_provider_or_none",
]
