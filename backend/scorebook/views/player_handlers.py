"""JSON handlers for the users collection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import Response

from scorebook.players.models import CreatePlayerRequest, UpdatePlayerRequest
from scorebook.views.payload import list_response, model_response, parse_body

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import JSONResponse

    from scorebook.games.ledger import GameLedger
    from scorebook.players.registry import PlayerRegistry


async def create_player(request: Request) -> JSONResponse:
    """POST /users"""
    players: PlayerRegistry = request.app.state.players
    body = await parse_body(request, CreatePlayerRequest, "Name is required")
    player = await players.create(body.name)
    return model_response(player, status_code=201)


async def list_players(request: Request) -> JSONResponse:
    """GET /users"""
    players: PlayerRegistry = request.app.state.players
    return list_response(players.list())


async def get_player(request: Request) -> JSONResponse:
    """GET /users/{player_id}"""
    players: PlayerRegistry = request.app.state.players
    return model_response(players.get(request.path_params["player_id"]))


async def update_player(request: Request) -> JSONResponse:
    """PUT /users/{player_id} - rename; an empty or missing name leaves it unchanged."""
    players: PlayerRegistry = request.app.state.players
    player_id = request.path_params["player_id"]
    players.get(player_id)
    body = await parse_body(request, UpdatePlayerRequest, "Invalid user data")
    player = await players.update(player_id, name=body.name)
    return model_response(player)


async def delete_player(request: Request) -> Response:
    """DELETE /users/{player_id} - game records keep the removed player's id."""
    players: PlayerRegistry = request.app.state.players
    await players.delete(request.path_params["player_id"])
    return Response(status_code=204)


async def list_player_games(request: Request) -> JSONResponse:
    """GET /users/{player_id}/games - empty for unknown ids, like any other filter."""
    ledger: GameLedger = request.app.state.ledger
    return list_response(ledger.list_for_player(request.path_params["player_id"]))
