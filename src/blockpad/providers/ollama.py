"""Ollama backend for AI polish.

Talks to a local Ollama server over its HTTP API:
- POST /api/chat for the rewrite (non-streaming)
- GET /api/tags for the model list and the health probe

Refused connections and timeouts on the chat call are retried with
backoff before they surface as LLMConnectionError or LLMTimeoutError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import tenacity

from blockpad.config import TIMEOUTS
from blockpad.errors import LLMConnectionError, LLMError, LLMModelError, LLMTimeoutError
from blockpad.settings import settings

from .base import ModelInfo, ProviderHealth

logger = logging.getLogger(__name__)

_GB = 1024**3


def _transient(exc: BaseException) -> bool:
    return isinstance(exc, (httpx.ConnectError, httpx.TimeoutException))


_with_backoff = tenacity.retry(
    retry=tenacity.retry_if_exception(_transient),
    stop=tenacity.stop_after_attempt(3),
    wait=tenacity.wait_exponential(multiplier=0.5, min=0.5, max=4),
    before_sleep=lambda state: logger.debug(
        "Ollama chat attempt %d failed, retrying", state.attempt_number
    ),
    reraise=True,
)


def _installed(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Model entries from an /api/tags reply, skipping malformed ones."""
    return [m for m in data.get("models", []) if isinstance(m, dict) and isinstance(m.get("name"), str)]


def _reply_text(data: dict[str, Any]) -> str:
    message = data.get("message")
    if not isinstance(message, dict):
        raise LLMError("Unexpected Ollama response: missing message", provider=OllamaProvider.provider_type)
    content = message.get("content")
    if not isinstance(content, str):
        raise LLMError("Unexpected Ollama response: missing content", provider=OllamaProvider.provider_type)
    return content.strip()


class OllamaProvider:
    """Polish backend served by a local Ollama instance.

    Example:
        provider = OllamaProvider(model="llama3.2:3b")
        provider.chat_text(system=EDITOR.POLISH_SYSTEM_PROMPT, user="teh quick brwn fox")
    """

    provider_type = "ollama"

    def __init__(self, *, url: str | None = None, model: str | None = None) -> None:
        """Create a provider.

        Args:
            url: Server URL; defaults to BLOCKPAD_OLLAMA_URL.
            model: Model name; defaults to BLOCKPAD_OLLAMA_MODEL, then to the
                first installed model on first use.
        """
        self._url = (url or settings.ollama_url).rstrip("/")
        self._model = model

    @property
    def url(self) -> str:
        return self._url

    def chat_text(
        self,
        *,
        system: str,
        user: str,
        timeout_seconds: float = TIMEOUTS.LLM_DEFAULT,
        temperature: float | None = None,
    ) -> str:
        try:
            model = self._model or self._resolve_model()
            data = self._chat(
                {
                    "model": model,
                    "stream": False,
                    "options": {} if temperature is None else {"temperature": float(temperature)},
                    "messages": [
                        {"role": "system", "content": system},
                        {"role": "user", "content": user},
                    ],
                },
                timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise self._translate(e, timeout_seconds) from e
        except ValueError as e:
            raise LLMError(f"Ollama sent a non-JSON reply: {e}", provider=self.provider_type) from e
        return _reply_text(data)

    def list_models(self) -> list[ModelInfo]:
        try:
            installed = self._tags(TIMEOUTS.OLLAMA_MODELS)
        except Exception as e:
            logger.warning("Could not list Ollama models: %s", e)
            return []
        return [
            ModelInfo(
                name=m["name"],
                size_gb=round(m["size"] / _GB, 1) if m.get("size") else None,
                family=(m.get("details") or {}).get("family"),
            )
            for m in installed
        ]

    def check_health(self) -> ProviderHealth:
        try:
            installed = self._tags(TIMEOUTS.OLLAMA_CHECK)
        except Exception as e:
            return ProviderHealth(reachable=False, error=str(e))
        return ProviderHealth(
            reachable=True,
            model_count=len(installed),
            current_model=self._model or settings.ollama_model,
        )

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    @_with_backoff
    def _chat(self, payload: dict[str, Any], timeout_seconds: float) -> dict[str, Any]:
        with httpx.Client(timeout=timeout_seconds) as client:
            res = client.post(f"{self._url}/api/chat", json=payload)
            res.raise_for_status()
            return res.json()

    def _tags(self, timeout_seconds: float) -> list[dict[str, Any]]:
        with httpx.Client(timeout=timeout_seconds) as client:
            res = client.get(f"{self._url}/api/tags")
            res.raise_for_status()
            return _installed(res.json())

    def _resolve_model(self) -> str:
        """Configured model, else the first one installed (remembered)."""
        if settings.ollama_model:
            return settings.ollama_model
        installed = self._tags(TIMEOUTS.OLLAMA_MODELS)
        if not installed:
            raise LLMModelError(
                "No Ollama models installed. Pull one with 'ollama pull <model>'.",
                reason="no_models",
            )
        self._model = installed[0]["name"]
        logger.info("Using first installed Ollama model: %s", self._model)
        return self._model

    def _translate(self, exc: httpx.HTTPError, timeout_seconds: float) -> LLMError:
        if isinstance(exc, httpx.ConnectError):
            return LLMConnectionError(
                f"Cannot connect to Ollama at {self._url}",
                provider=self.provider_type,
                url=self._url,
                suggestion="Start the server with 'ollama serve'",
            )
        if isinstance(exc, httpx.TimeoutException):
            return LLMTimeoutError(
                f"Ollama did not answer within {timeout_seconds}s",
                provider=self.provider_type,
                timeout_seconds=timeout_seconds,
            )
        if isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code == 404:
            model = self._model or settings.ollama_model or "unknown"
            return LLMModelError(
                f"Model '{model}' not found. Run 'ollama pull {model}' to download it.",
                model=model,
                reason="not_found",
            )
        return LLMError(f"Ollama request failed: {exc}", provider=self.provider_type, model=self._model)
