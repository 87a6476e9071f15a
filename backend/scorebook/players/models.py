"""Player profile model stored in the users collection."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Player(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    games_played_ids: list[str] = Field(default_factory=list)  # in the order the games were recorded
    games_won: int = 0
    games_lost: int = 0


class CreatePlayerRequest(BaseModel):
    name: str | None = None


class UpdatePlayerRequest(BaseModel):
    name: str | None = None
