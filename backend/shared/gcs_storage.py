"""Google Cloud Storage bucket behind the BlobStore protocol.

Each key is one object in the bucket. The google-cloud-storage client is
synchronous, so every call runs in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from google.api_core.exceptions import NotFound
from google.cloud import storage

from shared.storage import BlobNotFoundError

if TYPE_CHECKING:
    from google.cloud.storage import Bucket

logger = structlog.get_logger()

_CONTENT_TYPE = "application/json"


class GcsBlobStore:
    def __init__(self, bucket_name: str, client: storage.Client | None = None) -> None:
        if client is None:
            client = storage.Client()
        self._bucket: Bucket = client.bucket(bucket_name)

    @property
    def bucket_name(self) -> str:
        return self._bucket.name

    async def read(self, key: str) -> bytes:
        """Download the object stored under key. Raises BlobNotFoundError if absent."""
        blob = self._bucket.blob(key)
        try:
            return await asyncio.to_thread(blob.download_as_bytes)
        except NotFound as exc:
            raise BlobNotFoundError(key) from exc

    async def write(self, key: str, data: bytes) -> None:
        blob = self._bucket.blob(key)
        await asyncio.to_thread(blob.upload_from_string, data, content_type=_CONTENT_TYPE)
        logger.info("blob written", key=key, bucket=self._bucket.name, size=len(data))
