"""Game ledger: append-and-query over completed game records."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from scorebook.errors import NotFoundError, ValidationError
from scorebook.games.models import StoredGame
from scorebook.ids import new_id

if TYPE_CHECKING:
    from collections.abc import Callable

    from scorebook.errors import StorageReadError
    from scorebook.games.models import FinalGameResult, GameSettings, HandResult
    from scorebook.players.models import Player
    from scorebook.players.registry import PlayerRegistry
    from scorebook.store.collection import CollectionStore, LoadOutcome

logger = structlog.get_logger()


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class GameLedger:
    """Owns the games collection."""

    def __init__(
        self,
        store: CollectionStore[StoredGame],
        players: PlayerRegistry,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self._store = store
        self._players = players
        self._clock = clock
        self._id_factory = id_factory

    async def load(self) -> LoadOutcome:
        return await self._store.load()

    @property
    def load_error(self) -> StorageReadError | None:
        return self._store.last_load_error

    def participants(self, settings: GameSettings) -> tuple[Player, Player]:
        """Resolve both seats to registered players. Raises NotFoundError."""
        player1 = self._players.find(settings.player1_id)
        player2 = self._players.find(settings.player2_id)
        if player1 is None or player2 is None:
            raise NotFoundError("One or both players not found")
        return player1, player2

    async def create(
        self,
        settings: GameSettings | None,
        hands: list[HandResult] | None,
        final_result: FinalGameResult | None,
    ) -> StoredGame:
        """Validate, append and persist a new game with no summary yet.

        Both players must exist; nothing is mutated when either is unknown.
        """
        if settings is None or hands is None or final_result is None:
            raise ValidationError("Invalid game data")
        self.participants(settings)

        game_id = self._id_factory()
        while self.find(game_id) is not None:
            game_id = self._id_factory()

        game = StoredGame(
            id=game_id,
            date=self._clock(),
            settings=settings,
            hands=hands,
            final_result=final_result,
            ai_summary=None,
        )
        self._store.append(game)
        await self._store.persist()
        logger.info("game created", game_id=game.id, hands=len(hands))
        return game

    async def attach_summary(self, game_id: str, summary: str) -> StoredGame:
        match = self._store.find(lambda g: g.id == game_id)
        if match is None:
            raise NotFoundError("Game not found")
        index, game = match
        game = game.model_copy(update={"ai_summary": summary})
        self._store.put(index, game)
        await self._store.persist()
        return game

    def find(self, game_id: str) -> StoredGame | None:
        match = self._store.find(lambda g: g.id == game_id)
        return match[1] if match else None

    def get(self, game_id: str) -> StoredGame:
        game = self.find(game_id)
        if game is None:
            raise NotFoundError("Game not found")
        return game

    def list_all(self) -> list[StoredGame]:
        return self._store.records

    def list_for_player(self, player_id: str) -> list[StoredGame]:
        return [g for g in self._store.records if g.settings.involves(player_id)]

    def snapshot(self) -> list[StoredGame]:
        return self._store.records
