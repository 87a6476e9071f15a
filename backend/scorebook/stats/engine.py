"""Head-to-head statistics derived on demand from the game ledger.

Nothing here is persisted or cached: every call recomputes from the
snapshot it is given.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorebook.games.models import FinalGameResult, StoredGame


@dataclass(frozen=True)
class HeadToHeadStats:
    """Statistics for one pair of players, oriented to the current game's seats."""

    player1_id: str
    player2_id: str
    history: tuple[StoredGame, ...]  # every game between the pair, oldest first
    previous_games: tuple[StoredGame, ...]  # history without the current game
    player1_wins: int
    player2_wins: int
    ties: int
    shutout: bool
    win_streak: int  # 0 when the current game is a tie
    margin: int

    @property
    def streak_applies(self) -> bool:
        return self.win_streak > 0

    def wins_before(self, player_id: str) -> int:
        """Wins by player_id in the games preceding the current one."""
        return sum(1 for g in self.previous_games if g.final_result.winner_id == player_id)


def is_shutout(result: FinalGameResult) -> bool:
    """A shutout is a game where either side finished with zero raw points."""
    return result.player1_cumulative == 0 or result.player2_cumulative == 0


def head_to_head_history(games: Sequence[StoredGame], player1_id: str, player2_id: str) -> list[StoredGame]:
    """Games between exactly this pair of players, in either seat order."""
    return [g for g in games if g.settings.is_pair(player1_id, player2_id)]


def win_streak(previous_games: Sequence[StoredGame], winner_id: str | None) -> int:
    """Consecutive wins by winner_id ending with the current game.

    The current game counts as the first win; each immediately preceding
    game won by the same player adds one. A tie has no streak (0).
    """
    if winner_id is None:
        return 0
    streak = 1
    for game in reversed(previous_games):
        if game.final_result.winner_id != winner_id:
            break
        streak += 1
    return streak


def derive_head_to_head(games: Sequence[StoredGame], current: StoredGame) -> HeadToHeadStats:
    """Derive the statistics bundle for the pair of players in current.

    When games already contains current (the ledger snapshot taken after
    the game was appended), the history runs up to and including it; games
    appended after it by overlapping requests are not part of its history.
    """
    player1_id = current.settings.player1_id
    player2_id = current.settings.player2_id
    result = current.final_result

    history = head_to_head_history(games, player1_id, player2_id)
    position = next((i for i, g in enumerate(history) if g.id == current.id), None)
    if position is None:
        previous = history
    else:
        history = history[: position + 1]
        previous = history[:position]

    player1_wins = sum(1 for g in history if g.final_result.winner_id == player1_id)
    player2_wins = sum(1 for g in history if g.final_result.winner_id == player2_id)

    return HeadToHeadStats(
        player1_id=player1_id,
        player2_id=player2_id,
        history=tuple(history),
        previous_games=tuple(previous),
        player1_wins=player1_wins,
        player2_wins=player2_wins,
        ties=len(history) - player1_wins - player2_wins,
        shutout=is_shutout(result),
        win_streak=win_streak(previous, result.winner_id),
        margin=result.margin,
    )
