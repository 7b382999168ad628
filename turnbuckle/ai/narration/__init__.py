"""Optional prose narration for resolved matches."""

from .client import (
    GeminiClient,
    GenerationResult,
    NarrationAPIError,
    NarrationError,
    NarrationRateLimitError,
)
from .narrator import GeminiNarrator, Narrator, narrate_match
from .prompts import NARRATOR_SYSTEM, build_match_prompt

__all__ = [
    "GeminiClient",
    "GeminiNarrator",
    "GenerationResult",
    "NARRATOR_SYSTEM",
    "NarrationAPIError",
    "NarrationError",
    "NarrationRateLimitError",
    "Narrator",
    "build_match_prompt",
    "narrate_match",
]
