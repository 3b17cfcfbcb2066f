"""
Local filesystem storage backend.

Implements StorageBackend for local file system storage.
Used for development and single-host deployments.
"""

import shutil
from pathlib import Path
from typing import BinaryIO

from depot.core.exceptions import FileNotFoundError as StorageFileNotFoundError
from depot.core.exceptions import StorageError
from depot.core.logging import get_logger
from depot.services.storage.base import StorageBackend
from depot.services.storage.file import CHUNK_SIZE, StoredFile

logger = get_logger(__name__, backend="local")


class LocalStorageBackend(StorageBackend):
    """Local filesystem storage implementation."""

    def __init__(self, base_path: str | Path) -> None:
        """
        Initialize local storage backend.

        Args:
            base_path: Root directory for file storage.
        """
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, id: str) -> Path:
        """Get full filesystem path for an id."""
        # Prevent directory traversal attacks
        clean_id = id.lstrip("/").lstrip("\\")
        full_path = (self.base_path / clean_id).resolve()

        if full_path.parent != self.base_path:
            raise StorageError(
                message="Invalid file id",
                details={"id": id, "reason": "Path traversal detected"},
            )

        return full_path

    def _get_existing_path(self, id: str) -> Path:
        full_path = self._get_full_path(id)
        if not full_path.is_file():
            raise StorageFileNotFoundError(id)
        return full_path

    def upload(
        self,
        data: bytes | BinaryIO,
        content_type: str | None = None,
    ) -> StoredFile:
        """Write content to a new file under the base path."""
        id = self.generate_id(content_type)
        full_path = self._get_full_path(id)

        try:
            with open(full_path, "wb") as f:
                if isinstance(data, bytes):
                    f.write(data)
                else:
                    shutil.copyfileobj(data, f, CHUNK_SIZE)
        except OSError as e:
            raise StorageError(
                message=f"Failed to upload file: {e}",
                details={"id": id},
            ) from e

        logger.info(
            "file_uploaded",
            id=id,
            size=full_path.stat().st_size,
        )
        return self.get(id)

    def open(self, id: str) -> BinaryIO:
        full_path = self._get_existing_path(id)

        try:
            return open(full_path, "rb")
        except OSError as e:
            raise StorageError(
                message=f"Failed to open file: {e}",
                details={"id": id},
            ) from e

    def size(self, id: str) -> int:
        return self._get_existing_path(id).stat().st_size

    def type(self, id: str) -> str:
        self._get_existing_path(id)
        return self.guess_type(id)

    def delete(self, id: str) -> None:
        full_path = self._get_existing_path(id)

        try:
            full_path.unlink()
        except OSError as e:
            raise StorageError(
                message=f"Failed to delete file: {e}",
                details={"id": id},
            ) from e

        logger.info("file_deleted", id=id)

    def exists(self, id: str) -> bool:
        try:
            full_path = self._get_full_path(id)
        except StorageError:
            # Ids outside the base path can never be stored
            return False
        return full_path.is_file()

    def clear(self) -> None:
        """Delete every file under the base path."""
        for path in self.base_path.iterdir():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()

        logger.info("backend_cleared", path=str(self.base_path))
