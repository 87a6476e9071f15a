"""Server-assigned record identifiers."""

from uuid import uuid4


def new_id() -> str:
    return str(uuid4())
