"""Game record models stored in the games collection.

Field names are snake_case in Python and camelCase on the wire and in the
stored documents (e.g. ``final_result`` <-> ``finalResult``).
"""

from datetime import datetime
from enum import StrEnum
from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class HandWinner(StrEnum):
    PLAYER1 = "Player1"
    PLAYER2 = "Player2"
    TIE = "Tie"


class GameSettings(BaseModel):
    model_config = _CAMEL

    player1_id: str
    player2_id: str
    player1_name: str
    player2_name: str

    def involves(self, player_id: str) -> bool:
        return player_id in {self.player1_id, self.player2_id}

    def is_pair(self, first_id: str, second_id: str) -> bool:
        """True when the settings reference exactly this unordered pair of players."""
        return {self.player1_id, self.player2_id} == {first_id, second_id}


class HandResult(BaseModel):
    model_config = _CAMEL

    id: str
    player1_score: int
    player2_score: int
    winner: HandWinner | None = None  # None: hand abandoned / not scored


class FinalGameResult(BaseModel):
    model_config = _CAMEL

    player1_final_score: int  # cumulative plus hand-win bonuses
    player2_final_score: int
    player1_cumulative: int  # raw points before bonuses
    player2_cumulative: int
    player1_hands_won: int
    player2_hands_won: int
    hand_win_bonus: int
    winner_id: str | None = None  # None means a tie
    winner_name: str
    # echoed from settings by the client
    player1_name: str | None = None
    player2_name: str | None = None
    player1_id: str | None = None
    player2_id: str | None = None

    @property
    def is_tie(self) -> bool:
        return self.winner_id is None

    @property
    def margin(self) -> int:
        return abs(self.player1_final_score - self.player2_final_score)


class StoredGame(BaseModel):
    """A completed game. Immutable once created, except for ai_summary."""

    model_config = _CAMEL

    id: str
    date: datetime
    settings: GameSettings
    hands: list[HandResult]
    final_result: FinalGameResult
    ai_summary: str | None = None


class CreateGameRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    settings: GameSettings
    hands: list[HandResult]
    final_result: FinalGameResult

    @model_validator(mode="after")
    def _validate_participants(self) -> Self:
        if self.settings.player1_id == self.settings.player2_id:
            raise ValueError("A game needs two distinct players")
        winner_id = self.final_result.winner_id
        if winner_id is not None and not self.settings.involves(winner_id):
            raise ValueError("winnerId must reference one of the two players")
        return self
