"""Prompt construction for game recaps."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scorebook.narrative.narrator import NarrativeRequest

QUICK_GAME_HANDS = 5
LONG_GAME_HANDS = 10


def _score_line(name: str, final_score: int, raw: int, hands_won: int) -> str:
    return f"Final score for {name}: {final_score} (raw points: {raw}, hands won: {hands_won})"


def _streak_line(request: NarrativeRequest) -> str:
    stats = request.stats
    result = request.final_result
    if not stats.streak_applies:
        return "This game was a tie, so no win streak applies."
    loser = request.player2_name if result.winner_id == stats.player1_id else request.player1_name
    return (
        f"{result.winner_name} has now won {stats.win_streak} game(s) in a row against {loser}, "
        "counting this one."
    )


def build_prompt(request: NarrativeRequest) -> str:
    """Render the commentator prompt for one recorded game."""
    result = request.final_result
    stats = request.stats
    p1 = request.player1_name
    p2 = request.player2_name
    winner = "Nobody, it was a tie" if result.is_tie else result.winner_name

    lines = [
        "You are an insightful and witty commentator for Gin Rummy games.",
        "",
        "Game details:",
        f"Player 1: {p1}",
        f"Player 2: {p2}",
        f"Winner of this game: {winner}",
        _score_line(p1, result.player1_final_score, result.player1_cumulative, result.player1_hands_won),
        _score_line(p2, result.player2_final_score, result.player2_cumulative, result.player2_hands_won),
        f"Score difference: {stats.margin}",
        f"Hands played: {request.hand_count}",
        f"Target score for game completion: {request.target_score}",
        f"Bonus points per hand won: {request.hand_win_bonus}",
        f"Shutout (a player scored 0 raw points before bonuses): {'Yes' if stats.shutout else 'No'}",
        "",
        f"History between {p1} and {p2} before this game:",
        f"Games played against each other: {len(stats.previous_games)}",
        f"{p1}'s wins: {stats.wins_before(stats.player1_id)}",
        f"{p2}'s wins: {stats.wins_before(stats.player2_id)}",
        "",
        "Win streak:",
        _streak_line(request),
        "",
        "Instructions:",
        "1. Write a brief, engaging summary of this game in 2 to 4 sentences.",
        (
            f"2. Comment on the game's length: fewer than {QUICK_GAME_HANDS} hands is very quick, "
            f"{QUICK_GAME_HANDS} to {LONG_GAME_HANDS} is average, more than {LONG_GAME_HANDS} is long."
        ),
        "3. If the winner's streak is 2 or more games, mention it.",
        "4. If the game was a shutout, make a point of highlighting it.",
        "5. Note a dominant performance (large score difference) or a very close match.",
        "6. Keep the tone light and a little celebratory for the winner.",
        "7. Output plain text only: no markdown, bold, italics or other formatting.",
        "8. Focus on this game and use the history only where it adds something.",
    ]
    return "\n".join(lines)
