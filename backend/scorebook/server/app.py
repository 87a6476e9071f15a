from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from scorebook.errors import NotFoundError, StorageWriteError, ValidationError
from scorebook.games.ledger import GameLedger
from scorebook.games.models import StoredGame
from scorebook.games.service import GameRecordingService
from scorebook.narrative import GeminiNarrator, NarrativeSettings
from scorebook.players.models import Player
from scorebook.players.registry import PlayerRegistry
from scorebook.server.middleware import SlashNormalizationMiddleware
from scorebook.server.settings import ScorebookServerSettings
from scorebook.store.collection import CollectionStore, LoadOutcome
from scorebook.views import (
    create_player,
    delete_player,
    get_game,
    get_player,
    list_games,
    list_player_games,
    list_players,
    record_game,
    update_player,
)
from shared.gcs_storage import GcsBlobStore
from shared.logging import setup_logging
from shared.storage import LocalBlobStore

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request

    from scorebook.narrative import Narrator
    from shared.storage import BlobStore


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def _validation_error(_request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.BAD_REQUEST)


async def _not_found(_request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.NOT_FOUND)


async def _storage_write_error(_request: Request, exc: Exception) -> JSONResponse:
    """The cache already holds the mutation; report that it is not durable."""
    key = cast("StorageWriteError", exc).key
    return JSONResponse({"error": f"Failed to persist {key}"}, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


def build_blob_store(settings: ScorebookServerSettings) -> BlobStore:
    if settings.storage_backend == "gcs":
        return GcsBlobStore(settings.gcs_bucket)
    return LocalBlobStore(settings.bucket_dir)


async def load_collections(
    players: PlayerRegistry,
    ledger: GameLedger,
    *,
    strict: bool = False,
) -> dict[str, LoadOutcome]:
    """Load both collections. With strict=True a failed read aborts startup."""
    owners: dict[str, PlayerRegistry | GameLedger] = {"users": players, "games": ledger}
    outcomes: dict[str, LoadOutcome] = {}
    for name, owner in owners.items():
        outcomes[name] = await owner.load()
        if strict and owner.load_error is not None:
            raise owner.load_error
    logger.info("collections loaded", **{name: outcome.value for name, outcome in outcomes.items()})
    return outcomes


def create_app(
    settings: ScorebookServerSettings | None = None,
    narrative_settings: NarrativeSettings | None = None,
    *,
    blob_store: BlobStore | None = None,
    narrator: Narrator | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = ScorebookServerSettings()
    if narrative_settings is None:  # pragma: no cover
        narrative_settings = NarrativeSettings()
    if blob_store is None:
        blob_store = build_blob_store(settings)
    if narrator is None:
        narrator = GeminiNarrator.from_settings(narrative_settings)

    players = PlayerRegistry(CollectionStore(blob_store, settings.users_key, Player))
    ledger = GameLedger(CollectionStore(blob_store, settings.games_key, StoredGame), players)
    recorder = GameRecordingService(
        ledger,
        players,
        narrator,
        target_score=narrative_settings.target_score,
        hand_win_bonus=narrative_settings.hand_win_bonus,
    )

    routes = [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/users", list_players, methods=["GET"], name="list_players"),
        Route("/users", create_player, methods=["POST"], name="create_player"),
        Route("/users/{player_id}", get_player, methods=["GET"], name="get_player"),
        Route("/users/{player_id}", update_player, methods=["PUT"], name="update_player"),
        Route("/users/{player_id}", delete_player, methods=["DELETE"], name="delete_player"),
        Route("/users/{player_id}/games", list_player_games, methods=["GET"], name="list_player_games"),
        Route("/games", list_games, methods=["GET"], name="list_games"),
        Route("/games", record_game, methods=["POST"], name="record_game"),
        Route("/games/{game_id}", get_game, methods=["GET"], name="get_game"),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        await load_collections(players, ledger, strict=settings.strict_startup)
        yield

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={
            ValidationError: _validation_error,
            NotFoundError: _not_found,
            StorageWriteError: _storage_write_error,
        },
    )
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.state.settings = settings
    app.state.players = players
    app.state.ledger = ledger
    app.state.recorder = recorder

    logger.info("scorebook server ready", storage=settings.storage_backend)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory scorebook.server.app:get_app."""
    settings = ScorebookServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings, narrative_settings=NarrativeSettings())
