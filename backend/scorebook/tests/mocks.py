"""Test doubles for the blob store and the narrator."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import TYPE_CHECKING

from shared.storage import BlobNotFoundError

if TYPE_CHECKING:
    from scorebook.narrative.narrator import NarrativeRequest


class InMemoryBlobStore:
    """Dict-backed bucket with failure injection and controllable write completion."""

    def __init__(self, documents: dict[str, bytes] | None = None) -> None:
        self.documents: dict[str, bytes] = dict(documents or {})
        self.writes: list[tuple[str, bytes]] = []
        self.read_error: Exception | None = None
        self.write_error: Exception | None = None
        self._gates: deque[asyncio.Event] = deque()

    def gate_next_write(self) -> asyncio.Event:
        """Hold the next write call until the returned event is set."""
        gate = asyncio.Event()
        self._gates.append(gate)
        return gate

    async def read(self, key: str) -> bytes:
        if self.read_error is not None:
            raise self.read_error
        if key not in self.documents:
            raise BlobNotFoundError(key)
        return self.documents[key]

    async def write(self, key: str, data: bytes) -> None:
        if self.write_error is not None:
            raise self.write_error
        if self._gates:
            await self._gates.popleft().wait()
        self.documents[key] = data
        self.writes.append((key, data))


class StaticNarrator:
    """Returns a fixed summary and records every request it was given."""

    def __init__(self, summary: str = "What a game!") -> None:
        self.summary = summary
        self.requests: list[NarrativeRequest] = []

    async def generate(self, request: NarrativeRequest) -> str:
        self.requests.append(request)
        return self.summary
