"""Shared fixtures for scorebook tests."""

import pytest

from scorebook.games.ledger import GameLedger
from scorebook.games.models import StoredGame
from scorebook.games.service import GameRecordingService
from scorebook.players.models import Player
from scorebook.players.registry import PlayerRegistry
from scorebook.store.collection import CollectionStore
from scorebook.tests.builders import FIXED_DATE, GAMES_KEY, USERS_KEY
from scorebook.tests.mocks import InMemoryBlobStore, StaticNarrator


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def players(blob_store):
    return PlayerRegistry(CollectionStore(blob_store, USERS_KEY, Player))


@pytest.fixture
def ledger(blob_store, players):
    return GameLedger(CollectionStore(blob_store, GAMES_KEY, StoredGame), players, clock=lambda: FIXED_DATE)


@pytest.fixture
def narrator():
    return StaticNarrator()


@pytest.fixture
def recorder(ledger, players, narrator):
    return GameRecordingService(ledger, players, narrator)


@pytest.fixture
async def alice_and_bob(players):
    alice = await players.create("Alice")
    bob = await players.create("Bob")
    return alice, bob
