"""Generic in-memory collection mirrored to one JSON-array document.

The cache is the sole read path for request handling. Owners mutate it
synchronously and then await persist(); the whole list is serialized at the
moment persist()/replace() is called and written unconditionally, so two
overlapping persists of the same document resolve as last-writer-wins by
write completion order.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from scorebook.errors import StorageReadError, StorageWriteError
from shared.storage import BlobNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from shared.storage import BlobStore

logger = structlog.get_logger()

RecordT = TypeVar("RecordT", bound=BaseModel)


class LoadOutcome(StrEnum):
    LOADED = "loaded"
    MISSING = "missing"  # key absent: a fresh bucket, not an error
    FAILED = "failed"  # fetch or decode failed; cache degraded to empty


class CollectionStore(Generic[RecordT]):
    """Ordered record cache synchronized with one document in a BlobStore."""

    def __init__(self, blob_store: BlobStore, key: str, model: type[RecordT]) -> None:
        self._blob_store = blob_store
        self._key = key
        self._adapter: TypeAdapter[list[RecordT]] = TypeAdapter(list[model])
        self._records: list[RecordT] = []
        self.last_load_error: StorageReadError | None = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def records(self) -> list[RecordT]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def find(self, predicate: Callable[[RecordT], bool]) -> tuple[int, RecordT] | None:
        """Return (index, record) of the first record matching predicate."""
        for index, record in enumerate(self._records):
            if predicate(record):
                return index, record
        return None

    def append(self, record: RecordT) -> None:
        self._records.append(record)

    def put(self, index: int, record: RecordT) -> None:
        self._records[index] = record

    def pop(self, index: int) -> RecordT:
        return self._records.pop(index)

    async def load(self) -> LoadOutcome:
        """Fetch the document and replace the cache with its records.

        Never raises: a missing key and a failed read both leave an empty
        cache, distinguished by the returned outcome.
        """
        self.last_load_error = None
        try:
            raw = await self._blob_store.read(self._key)
        except BlobNotFoundError:
            self._records = []
            logger.info("collection document missing, starting empty", key=self._key)
            return LoadOutcome.MISSING
        except Exception as exc:  # noqa: BLE001
            return self._degrade(StorageReadError(self._key, str(exc) or type(exc).__name__))

        try:
            self._records = self._adapter.validate_json(raw)
        except PydanticValidationError as exc:
            return self._degrade(StorageReadError(self._key, f"invalid document: {exc.error_count()} error(s)"))

        logger.info("collection loaded", key=self._key, count=len(self._records))
        return LoadOutcome.LOADED

    def _degrade(self, error: StorageReadError) -> LoadOutcome:
        self._records = []
        self.last_load_error = error
        logger.error("collection load failed, starting empty", key=self._key, reason=error.reason)
        return LoadOutcome.FAILED

    def serialize(self, records: Iterable[RecordT] | None = None) -> bytes:
        """Render records (default: the cache) as a pretty-printed JSON array."""
        snapshot = self._records if records is None else list(records)
        return self._adapter.dump_json(snapshot, indent=2, by_alias=True)

    async def replace(self, records: Iterable[RecordT]) -> None:
        """Set the cache to records and overwrite the document with them."""
        self._records = list(records)
        await self.persist()

    async def persist(self) -> None:
        """Overwrite the document with the current cache. Raises StorageWriteError."""
        data = self.serialize()
        count = len(self._records)
        try:
            await self._blob_store.write(self._key, data)
        except Exception as exc:
            logger.exception("collection persist failed", key=self._key, count=count)
            raise StorageWriteError(self._key, str(exc) or type(exc).__name__) from exc
        logger.debug("collection persisted", key=self._key, count=count)
