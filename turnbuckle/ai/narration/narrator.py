"""
Best-effort match narration.

Narration decorates a result that already exists. Any failure (API
error, timeout) is logged and answered with None; the match result is
never affected.
"""

import asyncio
import logging
from typing import Optional, Protocol

from turnbuckle.core.models import MatchResult

from .client import GeminiClient, NarrationError
from .prompts import NARRATOR_SYSTEM, build_match_prompt

logger = logging.getLogger(__name__)


class Narrator(Protocol):
    """Anything that turns a prompt into prose."""

    async def generate_text(self, prompt: str) -> str:
        ...


class GeminiNarrator:
    """Narrator backed by the Gemini API."""

    TEMPERATURE = 0.9
    MAX_TOKENS = 300

    def __init__(self, client: Optional[GeminiClient] = None):
        self._client = client or GeminiClient()

    async def generate_text(self, prompt: str) -> str:
        result = await self._client.generate(
            system=NARRATOR_SYSTEM,
            user=prompt,
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        logger.debug(f"Narration generated: {result.latency_ms:.0f}ms, {result.total_tokens} tokens")
        return result.text.strip()

    async def close(self):
        await self._client.close()


async def narrate_match(
    narrator: Optional[Narrator],
    result: MatchResult,
    timeout: float = 10.0,
) -> Optional[str]:
    """
    Narrate a match, or return None if narration is unavailable.

    Args:
        narrator: Text generator; None skips narration
        result: The resolved match
        timeout: Seconds to wait before giving up
    """
    if narrator is None:
        return None
    prompt = build_match_prompt(result)
    try:
        text = await asyncio.wait_for(narrator.generate_text(prompt), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Narration for match {result.id} timed out after {timeout:.1f}s")
        return None
    except NarrationError as e:
        logger.error(f"Failed to narrate match {result.id}: {e}")
        return None
    except Exception:
        logger.exception(f"Narrator crashed on match {result.id}")
        return None
    return text or None
