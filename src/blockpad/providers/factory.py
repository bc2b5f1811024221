"""Provider Factory - Create the LLM provider used for AI polish.

Ollama is the only backend; the factory exists so callers never build a
provider directly and so the polish feature can be switched off.
"""

from __future__ import annotations

import logging

from blockpad.errors import ConfigurationError
from blockpad.settings import settings

from .base import LLMProvider, ProviderHealth
from .ollama import OllamaProvider

logger = logging.getLogger(__name__)


def get_provider(*, url: str | None = None, model: str | None = None) -> LLMProvider:
    """Get the configured LLM provider.

    Raises:
        ConfigurationError: If AI polish is disabled in settings.
    """
    if not settings.polish_enabled:
        raise ConfigurationError(
            "AI polish is disabled",
            setting="BLOCKPAD_POLISH_ENABLED",
            expected="true",
        )
    return OllamaProvider(url=url, model=model)


def get_provider_or_none() -> LLMProvider | None:
    """Get the configured provider, or None when polish is unavailable."""
    try:
        return get_provider()
    except ConfigurationError as e:
        logger.debug("No LLM provider: %s", e.message)
        return None


def check_provider_health() -> ProviderHealth:
    """Check health of the configured provider."""
    provider = get_provider_or_none()
    if provider is None:
        return ProviderHealth(reachable=False, error="AI polish is disabled")
    return provider.check_health()
