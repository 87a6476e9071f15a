"""Game recording workflow: ledger, player counters, statistics, recap."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scorebook.narrative.narrator import DEFAULT_HAND_WIN_BONUS, DEFAULT_TARGET_SCORE, NarrativeRequest
from scorebook.stats.engine import derive_head_to_head

if TYPE_CHECKING:
    from scorebook.games.ledger import GameLedger
    from scorebook.games.models import CreateGameRequest, StoredGame
    from scorebook.narrative.narrator import Narrator
    from scorebook.players.registry import PlayerRegistry

logger = structlog.get_logger()


class GameRecordingService:
    """Record a completed game and attach a generated recap.

    The ledger is persisted twice: once when the game is appended and again
    once the summary is attached. Readers in between see ai_summary=None.
    """

    def __init__(
        self,
        ledger: GameLedger,
        players: PlayerRegistry,
        narrator: Narrator,
        *,
        target_score: int = DEFAULT_TARGET_SCORE,
        hand_win_bonus: int = DEFAULT_HAND_WIN_BONUS,
    ) -> None:
        self._ledger = ledger
        self._players = players
        self._narrator = narrator
        self._target_score = target_score
        self._hand_win_bonus = hand_win_bonus

    async def record(self, request: CreateGameRequest) -> StoredGame:
        # Names for the recap come from the players as validated; either may
        # be deleted while the ledger write is in flight.
        player1, player2 = self._ledger.participants(request.settings)
        game = await self._ledger.create(request.settings, request.hands, request.final_result)
        log = logger.bind(game_id=game.id)

        await self._players.record_game_outcome(game)

        stats = derive_head_to_head(self._ledger.snapshot(), game)
        log.info(
            "head-to-head derived",
            history=len(stats.history),
            shutout=stats.shutout,
            win_streak=stats.win_streak,
        )

        summary = await self._narrator.generate(
            NarrativeRequest(
                player1_name=player1.name,
                player2_name=player2.name,
                final_result=game.final_result,
                hand_count=len(game.hands),
                stats=stats,
                target_score=self._target_score,
                hand_win_bonus=self._hand_win_bonus,
            ),
        )
        game = await self._ledger.attach_summary(game.id, summary)
        log.info("game recorded")
        return game
