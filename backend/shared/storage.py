"""Blob storage abstraction for collection documents.

A bucket is a flat key/value namespace of whole documents. Every write
replaces the full document; there is no partial update and no conditional
write, so concurrent writers resolve as last-writer-wins.

LocalBlobStore maps a bucket onto a directory (one file per key) and writes
atomically via temp-file-then-rename so readers never see a truncated
document.
"""

import asyncio
import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

# Owner-only directory permissions for the bucket directory.
_BUCKET_DIR_MODE = 0o700

# Owner-only file permissions for document files.
_BLOB_FILE_MODE = 0o600


class BlobNotFoundError(KeyError):
    """Requested key does not exist in the bucket."""


class BlobStore(Protocol):
    """Protocol for a key-addressed whole-document store."""

    async def read(self, key: str) -> bytes: ...

    async def write(self, key: str, data: bytes) -> None: ...


class LocalBlobStore:
    """Directory-backed bucket.

    Files are created with owner-only read/write (0o600) inside an
    owner-only directory (0o700).
    """

    def __init__(self, bucket_dir: str | Path) -> None:
        self._bucket_dir = Path(bucket_dir).resolve()

    @property
    def bucket_dir(self) -> Path:
        return self._bucket_dir

    def _resolve(self, key: str) -> Path:
        target = (self._bucket_dir / key).resolve()
        if not target.is_relative_to(self._bucket_dir) or target == self._bucket_dir:
            raise ValueError(f"Path traversal rejected: '{key}' resolves outside bucket directory")
        return target

    async def read(self, key: str) -> bytes:
        """Return the document stored under key. Raises BlobNotFoundError if absent."""
        target = self._resolve(key)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except FileNotFoundError as exc:
            raise BlobNotFoundError(key) from exc

    async def write(self, key: str, data: bytes) -> None:
        """Overwrite the document stored under key."""
        target = self._resolve(key)
        await asyncio.to_thread(self._write_atomic, target, data)
        logger.info("blob written", key=key, path=str(target), size=len(data))

    def _write_atomic(self, target: Path, data: bytes) -> None:
        self._bucket_dir.mkdir(mode=_BUCKET_DIR_MODE, parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._bucket_dir), suffix=".tmp", prefix=".blob_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _BLOB_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
