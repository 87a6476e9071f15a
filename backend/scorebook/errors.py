"""Error taxonomy for the scorebook service.

Each error maps to one HTTP outcome in scorebook.server.app:
ValidationError -> 400, NotFoundError -> 404, StorageWriteError -> 500.
StorageReadError and NarrativeGenerationError are recovered where they occur.
"""


class ScorebookError(Exception):
    """Base class for scorebook domain errors."""


class ValidationError(ScorebookError):
    """A required field is missing or malformed."""


class NotFoundError(ScorebookError):
    """A referenced identifier does not exist."""


class StorageReadError(ScorebookError):
    """A collection document could not be fetched or decoded."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Failed to load '{key}': {reason}")
        self.key = key
        self.reason = reason


class StorageWriteError(ScorebookError):
    """A collection document could not be persisted."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Failed to persist '{key}': {reason}")
        self.key = key
        self.reason = reason


class NarrativeGenerationError(ScorebookError):
    """The narrative service could not produce a summary."""
