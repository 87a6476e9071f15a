"""Request body decoding and response encoding shared by the JSON handlers."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TypeVar

import pydantic
from starlette.responses import JSONResponse

from scorebook.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from starlette.requests import Request

_MAX_REQUEST_BODY_SIZE = 1024 * 1024

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


async def parse_body(request: Request, model: type[ModelT], error: str) -> ModelT:
    """Decode the JSON body into model. Raises ValidationError with error as the message."""
    raw_body = await request.body()
    if len(raw_body) > _MAX_REQUEST_BODY_SIZE:
        raise ValidationError("Request body too large")
    try:
        body: Any = json.loads(raw_body) if raw_body.strip() else {}
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValidationError("Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise ValidationError(error)
    try:
        return model.model_validate(body)
    except pydantic.ValidationError as exc:
        raise ValidationError(error) from exc


def model_response(model: pydantic.BaseModel, status_code: int = 200) -> JSONResponse:
    return JSONResponse(model.model_dump(mode="json", by_alias=True), status_code=status_code)


def list_response(models: Sequence[pydantic.BaseModel]) -> JSONResponse:
    return JSONResponse([m.model_dump(mode="json", by_alias=True) for m in models])
