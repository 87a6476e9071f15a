"""Narrator interface: statistics bundle in, recap text out, never raises."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from scorebook.games.models import FinalGameResult
    from scorebook.stats.engine import HeadToHeadStats

DEFAULT_TARGET_SCORE = 200
DEFAULT_HAND_WIN_BONUS = 10

_MAX_ERROR_DETAIL = 100

MISSING_KEY_FALLBACK = "Could not generate AI summary. API key might be missing or invalid."
GENERIC_FALLBACK = "Could not generate AI summary."


@dataclass(frozen=True)
class NarrativeRequest:
    player1_name: str
    player2_name: str
    final_result: FinalGameResult
    hand_count: int
    stats: HeadToHeadStats
    target_score: int = DEFAULT_TARGET_SCORE
    hand_win_bonus: int = DEFAULT_HAND_WIN_BONUS


@runtime_checkable
class Narrator(Protocol):
    """Produce a plain-text recap of a recorded game.

    Implementations must return fallback text instead of raising, so a
    failed recap never aborts recording the game.
    """

    async def generate(self, request: NarrativeRequest) -> str: ...


def fallback_summary(error: Exception) -> str:
    """Apologetic summary text describing why generation failed."""
    message = str(error)
    if "API_KEY" in message or "API key" in message:
        return MISSING_KEY_FALLBACK
    if not message:
        return GENERIC_FALLBACK
    detail = message[:_MAX_ERROR_DETAIL]
    if len(message) > _MAX_ERROR_DETAIL:
        detail += "..."
    return f"Could not generate AI summary: {detail}"
