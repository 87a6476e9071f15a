"""Narrative service configuration via environment variables."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from scorebook.narrative.narrator import DEFAULT_HAND_WIN_BONUS, DEFAULT_TARGET_SCORE


class NarrativeSettings(BaseSettings):
    model_config = {"env_prefix": "NARRATIVE_", "populate_by_name": True}

    # Empty means unset: recaps fall back to an apology instead of failing startup.
    # API_KEY is the variable name older deployments use.
    api_key: str = Field(default="", validation_alias=AliasChoices("NARRATIVE_API_KEY", "API_KEY"))
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = Field(default=30.0, gt=0)

    # Scoring rules quoted in the recap prompt
    target_score: int = DEFAULT_TARGET_SCORE
    hand_win_bonus: int = DEFAULT_HAND_WIN_BONUS
