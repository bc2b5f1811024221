"""AI polish: rewrite one block's text through an external improver.

The improver gets the block's plain text (formatting stripped) and its
answer overwrites the block's content. The call is the editor's only
suspension point; other edits keep flowing while it is pending. Whichever
write reaches the document last wins: a local edit made during the call is
overwritten by the result, and a result for a block removed in the
meantime is dropped.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import Counter
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from blockpad.config import EDITOR, TIMEOUTS

from .rich_text import plain_text, text

if TYPE_CHECKING:
    from blockpad.providers.base import LLMProvider

    from .session import EditorSession

logger = logging.getLogger(__name__)

Improve = Callable[[str], Awaitable[str] | str]


class PolishBridge:
    """Runs AI polish for the blocks of one session."""

    def __init__(self, session: EditorSession, improve: Improve) -> None:
        self._session = session
        self._improve = improve
        # block id -> polish calls in flight
        self._pending: Counter[str] = Counter()

    @property
    def pending(self) -> frozenset[str]:
        """Ids of blocks with a polish call in flight."""
        return frozenset(+self._pending)

    async def polish(self, block_id: str) -> bool:
        """Rewrite a block's text; True if the document was updated.

        Empty blocks are skipped. Improver failures are logged and leave
        the block untouched.
        """
        if self._session.read_only:
            return False

        block = self._session.get_block(block_id)
        if block is None:
            return False

        source = plain_text(block.content)
        if not source:
            return False

        self._pending[block_id] += 1
        try:
            result = self._improve(source)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.warning("AI polish failed for block %s: %s", block_id, e)
            return False
        finally:
            self._pending[block_id] -= 1
            if not self._pending[block_id]:
                del self._pending[block_id]

        if not isinstance(result, str):
            logger.warning("AI polish returned %s for block %s; ignored", type(result).__name__, block_id)
            return False

        return self._session.update_content(block_id, text(result))


def provider_improver(
    provider: LLMProvider,
    *,
    timeout_seconds: float = TIMEOUTS.LLM_DEFAULT,
) -> Callable[[str], Awaitable[str]]:
    """Adapt a blocking LLM provider to the async improve capability.

    The provider call runs in a worker thread so the event loop keeps
    serving input while the model answers.
    """

    async def improve(source: str) -> str:
        return await asyncio.to_thread(
            provider.chat_text,
            system=EDITOR.POLISH_SYSTEM_PROMPT,
            user=source,
            timeout_seconds=timeout_seconds,
            temperature=EDITOR.POLISH_TEMPERATURE,
        )

    return improve
