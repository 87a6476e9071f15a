"""Scorebook server configuration via environment variables."""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class ScorebookServerSettings(BaseSettings):
    model_config = {"env_prefix": "SCOREBOOK_", "populate_by_name": True}

    host: str = "0.0.0.0"  # noqa: S104
    # PORT is what container platforms inject
    port: int = Field(default=8080, ge=1, le=65535, validation_alias=AliasChoices("SCOREBOOK_PORT", "PORT"))
    log_dir: str | None = None

    # Bucket holding the two collection documents: a local directory, or a
    # Google Cloud Storage bucket when storage_backend is "gcs"
    storage_backend: Literal["local", "gcs"] = "local"
    bucket_dir: str = "data/gin-rummy"
    gcs_bucket: str = "gin-rummy"
    users_key: str = "users.json"
    games_key: str = "games.json"

    # Refuse to start when an existing document cannot be read, instead of
    # serving (and later overwriting) an empty collection.
    strict_startup: bool = False

    cors_origins: list[str] = ["*"]
