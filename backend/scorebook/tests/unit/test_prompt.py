"""Tests for recap prompt rendering."""

from scorebook.narrative.narrator import NarrativeRequest
from scorebook.narrative.prompt import build_prompt
from scorebook.stats.engine import derive_head_to_head
from scorebook.tests.builders import stored_game

A, B = "player-a", "player-b"


def _request(games, current, **kwargs):
    return NarrativeRequest(
        player1_name="Alice",
        player2_name="Bob",
        final_result=current.final_result,
        hand_count=len(current.hands),
        stats=derive_head_to_head(games, current),
        **kwargs,
    )


def test_first_game_shutout_prompt():
    current = stored_game("g1", A, B, player1_cumulative=150, player2_cumulative=0)

    prompt = build_prompt(_request([current], current))

    assert "Winner of this game: Alice" in prompt
    assert "Final score for Alice: 190 (raw points: 150, hands won: 4)" in prompt
    assert "Score difference: 190" in prompt
    assert "Hands played: 4" in prompt
    assert "Target score for game completion: 200" in prompt
    assert "Bonus points per hand won: 10" in prompt
    assert "Shutout (a player scored 0 raw points before bonuses): Yes" in prompt
    assert "Games played against each other: 0" in prompt
    assert "Alice has now won 1 game(s) in a row against Bob" in prompt


def test_history_excludes_current_game():
    prior = [
        stored_game("g1", A, B, winner_id=A),
        stored_game("g2", A, B, winner_id=B),
        stored_game("g3", B, A, winner_id=A),
    ]
    current = stored_game("g4", A, B, winner_id=A)

    prompt = build_prompt(_request([*prior, current], current))

    assert "Games played against each other: 3" in prompt
    assert "Alice's wins: 2" in prompt
    assert "Bob's wins: 1" in prompt
    assert "Shutout (a player scored 0 raw points before bonuses): No" in prompt
    assert "won 2 game(s) in a row" in prompt


def test_tie_prompt_has_no_streak():
    current = stored_game("g1", A, B, tie=True)

    prompt = build_prompt(_request([current], current))

    assert "Winner of this game: Nobody, it was a tie" in prompt
    assert "This game was a tie, so no win streak applies." in prompt
    assert "in a row" not in prompt


def test_custom_scoring_rules():
    current = stored_game("g1", A, B)

    prompt = build_prompt(_request([current], current, target_score=150, hand_win_bonus=25))

    assert "Target score for game completion: 150" in prompt
    assert "Bonus points per hand won: 25" in prompt


def test_instructions_ask_for_plain_text():
    current = stored_game("g1", A, B)

    prompt = build_prompt(_request([current], current))

    assert "no markdown" in prompt
    assert prompt.count("\n1. ") == 1
    assert "8. " in prompt
