"""Player registry: the users collection with identity and win/loss counters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scorebook.errors import NotFoundError, ValidationError
from scorebook.ids import new_id
from scorebook.players.models import Player

if TYPE_CHECKING:
    from collections.abc import Callable

    from scorebook.errors import StorageReadError
    from scorebook.games.models import StoredGame
    from scorebook.store.collection import CollectionStore, LoadOutcome

logger = structlog.get_logger()


class PlayerRegistry:
    """Owns the users collection.

    Every mutation updates the cache synchronously and then awaits a
    whole-document persist. Reads never touch storage.
    """

    def __init__(self, store: CollectionStore[Player], id_factory: Callable[[], str] = new_id) -> None:
        self._store = store
        self._id_factory = id_factory

    async def load(self) -> LoadOutcome:
        return await self._store.load()

    @property
    def load_error(self) -> StorageReadError | None:
        return self._store.last_load_error

    def list(self) -> list[Player]:
        return self._store.records

    def find(self, player_id: str) -> Player | None:
        match = self._store.find(lambda p: p.id == player_id)
        return match[1] if match else None

    def get(self, player_id: str) -> Player:
        player = self.find(player_id)
        if player is None:
            raise NotFoundError("User not found")
        return player

    def _index_of(self, player_id: str) -> int:
        match = self._store.find(lambda p: p.id == player_id)
        if match is None:
            raise NotFoundError("User not found")
        return match[0]

    def _allocate_id(self) -> str:
        player_id = self._id_factory()
        while self.find(player_id) is not None:
            player_id = self._id_factory()
        return player_id

    async def create(self, name: str | None) -> Player:
        if not name:
            raise ValidationError("Name is required")
        player = Player(id=self._allocate_id(), name=name)
        self._store.append(player)
        await self._store.persist()
        logger.info("player created", player_id=player.id)
        return player

    async def update(self, player_id: str, name: str | None = None) -> Player:
        index = self._index_of(player_id)
        player = self._store.records[index]
        if name:
            player = player.model_copy(update={"name": name})
            self._store.put(index, player)
        await self._store.persist()
        return player

    async def delete(self, player_id: str) -> None:
        """Remove a player. Game records referencing the player are left untouched."""
        index = self._index_of(player_id)
        self._store.pop(index)
        await self._store.persist()
        logger.info("player deleted", player_id=player_id)

    def _credit(self, player_id: str, game: StoredGame) -> Player | None:
        match = self._store.find(lambda p: p.id == player_id)
        if match is None:
            logger.warning("player removed before game outcome recorded", game_id=game.id, player_id=player_id)
            return None
        index, player = match
        winner_id = game.final_result.winner_id
        player = player.model_copy(
            update={
                "games_played_ids": [*player.games_played_ids, game.id],
                "games_won": player.games_won + int(winner_id == player_id),
                "games_lost": player.games_lost + int(winner_id is not None and winner_id != player_id),
            },
        )
        self._store.put(index, player)
        return player

    async def record_game_outcome(self, game: StoredGame) -> tuple[Player | None, Player | None]:
        """Append the game to both players and move win/loss counters.

        On a tie only the game lists change. A player deleted since the game
        was validated is skipped and returned as None. Persists once.
        """
        player1 = self._credit(game.settings.player1_id, game)
        player2 = self._credit(game.settings.player2_id, game)
        await self._store.persist()
        logger.info("game outcome recorded", game_id=game.id, winner_id=game.final_result.winner_id)
        return player1, player2
