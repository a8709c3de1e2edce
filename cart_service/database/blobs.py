"""Blob storage backends for cart documents"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..core.config import Settings, settings as default_settings
from ..core.errors import StorageFailure

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """Single-key blob store with exists/download/upload primitives"""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check whether a blob exists at path"""

    @abstractmethod
    async def download(self, path: str) -> bytes:
        """Read the blob at path"""

    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str = "application/json") -> None:
        """Create or overwrite the blob at path"""


class MemoryBlobStore(BlobStore):
    """In-memory blob storage"""

    def __init__(self):
        self.blobs: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}

    async def exists(self, path: str) -> bool:
        return path in self.blobs

    async def download(self, path: str) -> bytes:
        try:
            return self.blobs[path]
        except KeyError:
            raise StorageFailure(f"No blob at {path}")

    async def upload(self, path: str, data: bytes, content_type: str = "application/json") -> None:
        self.blobs[path] = bytes(data)
        self.content_types[path] = content_type


class LocalBlobStore(BlobStore):
    """
    Directory-backed blob storage.

    Blob paths are resolved below a root directory. File I/O is blocking and
    runs in a worker thread.
    """

    def __init__(self, root: str):
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        # Only canonical relative paths, so distinct keys never alias one file
        if path.startswith("/") or any(part in ("", ".", "..") for part in path.split("/")):
            raise StorageFailure(f"Invalid blob path: {path}")

        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root):
            raise StorageFailure(f"Blob path escapes storage root: {path}")
        return target

    async def exists(self, path: str) -> bool:
        target = self._resolve(path)
        return await asyncio.to_thread(target.is_file)

    async def download(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except OSError as e:
            raise StorageFailure(f"Failed to read {path}: {e}") from e

    async def upload(self, path: str, data: bytes, content_type: str = "application/json") -> None:
        target = self._resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp = target.with_suffix(target.suffix + ".tmp")
            tmp.write_bytes(data)
            tmp.replace(target)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageFailure(f"Failed to write {path}: {e}") from e


def create_blob_store(settings: Optional[Settings] = None) -> BlobStore:
    """Build the blob store selected by configuration"""
    settings = settings or default_settings
    backend = settings.storage_backend.lower()

    if backend == "memory":
        return MemoryBlobStore()
    if backend == "local":
        logger.info(f"Using local blob storage at {settings.storage_dir}")
        return LocalBlobStore(settings.storage_dir)

    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
