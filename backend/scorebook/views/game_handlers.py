"""JSON handlers for the games collection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorebook.games.models import CreateGameRequest
from scorebook.views.payload import list_response, model_response, parse_body

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import JSONResponse

    from scorebook.games.ledger import GameLedger
    from scorebook.games.service import GameRecordingService


async def record_game(request: Request) -> JSONResponse:
    """POST /games - record a completed game and return it with its recap."""
    recorder: GameRecordingService = request.app.state.recorder
    body = await parse_body(request, CreateGameRequest, "Invalid game data")
    game = await recorder.record(body)
    return model_response(game, status_code=201)


async def list_games(request: Request) -> JSONResponse:
    ledger: GameLedger = request.app.state.ledger
    return list_response(ledger.list_all())


async def get_game(request: Request) -> JSONResponse:
    ledger: GameLedger = request.app.state.ledger
    return model_response(ledger.get(request.path_params["game_id"]))
