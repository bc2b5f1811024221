"""Centralized configuration constants for blockpad.

This module provides a single source of truth for:
- Timeouts (LLM calls, provider health checks)
- Editor tuning (toolbar placement, polish sampling)

Constants can be overridden via environment variables where noted.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


# =============================================================================
# Helper functions
# =============================================================================


def _env_float(name: str, default: float, min_val: float | None = None) -> float:
    """Get float from environment with optional minimum enforcement."""
    val = float(os.environ.get(name, str(default)))
    if min_val is not None and val < min_val:
        return min_val
    return val


# =============================================================================
# Timeouts (in seconds)
# =============================================================================


@dataclass(frozen=True)
class Timeouts:
    """Timeout values for outbound calls."""

    # API/LLM timeouts
    LLM_DEFAULT: float = _env_float("BLOCKPAD_LLM_TIMEOUT", 60.0, min_val=5.0)
    OLLAMA_CHECK: float = 5.0
    OLLAMA_MODELS: float = 2.0


TIMEOUTS = Timeouts()


# =============================================================================
# Editor Tuning
# =============================================================================


@dataclass(frozen=True)
class EditorConfig:
    """Layout and behavior constants for the block editor."""

    # Floating toolbar sits this many pixels above the selection box
    TOOLBAR_OFFSET_PX: float = 45.0

    # Rewrites should stay close to the author's wording
    POLISH_TEMPERATURE: float = 0.3

    POLISH_SYSTEM_PROMPT: str = (
        "You are a writing assistant. Improve the grammar, clarity and flow "
        "of the user's text while keeping its meaning and tone. "
        "Reply with the improved text only, without quotes or commentary."
    )


EDITOR = EditorConfig()
