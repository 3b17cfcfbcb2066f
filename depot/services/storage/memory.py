"""
In-memory storage backend.

Keeps file content in a dict. Used for caching uploads between requests in a
single process and for tests.
"""

import io
from typing import BinaryIO

from depot.core.exceptions import FileNotFoundError as StorageFileNotFoundError
from depot.core.logging import get_logger
from depot.services.storage.base import DEFAULT_CONTENT_TYPE, StorageBackend
from depot.services.storage.file import StoredFile

logger = get_logger(__name__, backend="memory")


class MemoryBackend(StorageBackend):
    """In-memory storage implementation."""

    def __init__(self) -> None:
        self._files: dict[str, tuple[bytes, str]] = {}

    def _get_entry(self, id: str) -> tuple[bytes, str]:
        try:
            return self._files[id]
        except KeyError:
            raise StorageFileNotFoundError(id) from None

    def upload(
        self,
        data: bytes | BinaryIO,
        content_type: str | None = None,
    ) -> StoredFile:
        """Store content in memory."""
        content = data if isinstance(data, bytes) else data.read()
        id = self.generate_id()
        self._files[id] = (content, content_type or DEFAULT_CONTENT_TYPE)

        logger.info("file_uploaded", id=id, size=len(content))
        return self.get(id)

    def open(self, id: str) -> BinaryIO:
        content, _ = self._get_entry(id)
        return io.BytesIO(content)

    def size(self, id: str) -> int:
        content, _ = self._get_entry(id)
        return len(content)

    def type(self, id: str) -> str:
        _, content_type = self._get_entry(id)
        return content_type

    def delete(self, id: str) -> None:
        self._get_entry(id)
        del self._files[id]
        logger.info("file_deleted", id=id)

    def exists(self, id: str) -> bool:
        return id in self._files

    def clear(self) -> None:
        self._files.clear()
