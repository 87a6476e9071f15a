"""Tests for CollectionStore load/persist semantics."""

import asyncio
import json
import logging

import pytest

from scorebook.errors import StorageReadError, StorageWriteError
from scorebook.players.models import Player
from scorebook.players.registry import PlayerRegistry
from scorebook.store.collection import CollectionStore, LoadOutcome
from scorebook.tests.mocks import InMemoryBlobStore

KEY = "users.json"


def _player(player_id="p1", name="Alice", **kwargs) -> Player:
    return Player(id=player_id, name=name, **kwargs)


def _store(blob_store: InMemoryBlobStore) -> CollectionStore[Player]:
    return CollectionStore(blob_store, KEY, Player)


class TestLoad:
    async def test_missing_document_starts_empty(self):
        store = _store(InMemoryBlobStore())

        outcome = await store.load()

        assert outcome is LoadOutcome.MISSING
        assert store.records == []
        assert store.last_load_error is None

    async def test_loads_existing_records_in_order(self):
        document = json.dumps(
            [
                {"id": "p1", "name": "Alice", "gamesPlayedIds": ["g1"], "gamesWon": 1, "gamesLost": 0},
                {"id": "p2", "name": "Bob", "gamesPlayedIds": ["g1"], "gamesWon": 0, "gamesLost": 1},
            ],
        ).encode()
        store = _store(InMemoryBlobStore({KEY: document}))

        outcome = await store.load()

        assert outcome is LoadOutcome.LOADED
        assert [p.name for p in store.records] == ["Alice", "Bob"]
        assert store.records[0].games_played_ids == ["g1"]
        assert store.records[1].games_lost == 1

    async def test_corrupt_json_degrades_to_empty(self, caplog):
        store = _store(InMemoryBlobStore({KEY: b"[{not json"}))

        with caplog.at_level(logging.ERROR):
            outcome = await store.load()

        assert outcome is LoadOutcome.FAILED
        assert store.records == []
        assert isinstance(store.last_load_error, StorageReadError)
        assert "collection load failed" in caplog.text

    async def test_wrong_shape_degrades_to_empty(self):
        store = _store(InMemoryBlobStore({KEY: b'{"id": "p1"}'}))

        outcome = await store.load()

        assert outcome is LoadOutcome.FAILED
        assert store.records == []

    async def test_read_failure_degrades_to_empty(self):
        blob_store = InMemoryBlobStore({KEY: b"[]"})
        blob_store.read_error = ConnectionError("bucket unreachable")
        store = _store(blob_store)

        outcome = await store.load()

        assert outcome is LoadOutcome.FAILED
        assert store.last_load_error is not None
        assert store.last_load_error.key == KEY
        assert "bucket unreachable" in str(store.last_load_error)

    async def test_reload_clears_previous_error(self):
        blob_store = InMemoryBlobStore({KEY: b"oops"})
        store = _store(blob_store)
        await store.load()

        blob_store.documents[KEY] = b"[]"
        outcome = await store.load()

        assert outcome is LoadOutcome.LOADED
        assert store.last_load_error is None


class TestPersist:
    async def test_writes_pretty_printed_camel_case_array(self):
        blob_store = InMemoryBlobStore()
        store = _store(blob_store)
        store.append(_player())

        await store.persist()

        raw = blob_store.documents[KEY].decode()
        assert raw.startswith("[\n  {")
        assert json.loads(raw) == [{"id": "p1", "name": "Alice", "gamesPlayedIds": [], "gamesWon": 0, "gamesLost": 0}]

    async def test_round_trip_reload_equals_snapshot(self):
        blob_store = InMemoryBlobStore()
        store = _store(blob_store)
        snapshot = [_player("p1", "Alice", games_played_ids=["g1", "g2"], games_won=2), _player("p2", "Bob")]
        await store.replace(snapshot)

        reloaded = _store(blob_store)
        await reloaded.load()

        assert reloaded.records == snapshot

    async def test_replace_overwrites_unconditionally(self):
        blob_store = InMemoryBlobStore({KEY: json.dumps([{"id": "old", "name": "Old"}]).encode()})
        store = _store(blob_store)

        await store.replace([_player("new", "New")])

        assert [p["id"] for p in json.loads(blob_store.documents[KEY])] == ["new"]

    async def test_write_failure_raises_and_keeps_cache(self):
        blob_store = InMemoryBlobStore()
        blob_store.write_error = OSError("disk full")
        store = _store(blob_store)
        store.append(_player())

        with pytest.raises(StorageWriteError, match="disk full") as exc_info:
            await store.persist()

        assert exc_info.value.key == KEY
        # the cache is not rolled back; it diverges from storage until the next persist
        assert [p.id for p in store.records] == ["p1"]
        assert KEY not in blob_store.documents

    async def test_records_returns_copy(self):
        store = _store(InMemoryBlobStore())
        store.append(_player())

        store.records.clear()

        assert len(store) == 1


class TestLastWriterWins:
    async def test_out_of_order_completion_clobbers_newer_snapshot(self):
        """Two overlapping persists: the write that completes last is durable."""
        blob_store = InMemoryBlobStore()
        registry = PlayerRegistry(_store(blob_store))
        first_write = blob_store.gate_next_write()
        second_write = blob_store.gate_next_write()

        create_alice = asyncio.create_task(registry.create("Alice"))
        await asyncio.sleep(0)  # appends Alice, serializes [Alice], waits on first_write
        create_bob = asyncio.create_task(registry.create("Bob"))
        await asyncio.sleep(0)  # appends Bob, serializes [Alice, Bob], waits on second_write

        second_write.set()
        await create_bob
        first_write.set()
        await create_alice

        durable = json.loads(blob_store.documents[KEY])
        assert [p["name"] for p in durable] == ["Alice"]
        # the in-memory cache never loses an update
        assert [p.name for p in registry.list()] == ["Alice", "Bob"]

    async def test_in_order_completion_keeps_latest_snapshot(self):
        blob_store = InMemoryBlobStore()
        registry = PlayerRegistry(_store(blob_store))
        first_write = blob_store.gate_next_write()
        second_write = blob_store.gate_next_write()

        create_alice = asyncio.create_task(registry.create("Alice"))
        await asyncio.sleep(0)
        create_bob = asyncio.create_task(registry.create("Bob"))
        await asyncio.sleep(0)

        first_write.set()
        await create_alice
        second_write.set()
        await create_bob

        durable = json.loads(blob_store.documents[KEY])
        assert [p["name"] for p in durable] == ["Alice", "Bob"]
