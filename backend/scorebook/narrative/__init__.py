"""Game recap generation behind the Narrator protocol."""

from scorebook.narrative.gemini import GeminiNarrator
from scorebook.narrative.narrator import NarrativeRequest, Narrator, fallback_summary
from scorebook.narrative.prompt import build_prompt
from scorebook.narrative.settings import NarrativeSettings

__all__ = [
    "GeminiNarrator",
    "NarrativeRequest",
    "NarrativeSettings",
    "Narrator",
    "build_prompt",
    "fallback_summary",
]
