"""
Abstract base class for storage backends.

Provides a consistent interface for in-memory, local filesystem and S3
storage. Backends are addressed by opaque ids and hand out StoredFile
handles; the handle decides when a byte stream is actually opened.
"""

import mimetypes
import uuid
from abc import ABC, abstractmethod
from typing import BinaryIO

from depot.services.storage.file import StoredFile

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod
    def upload(
        self,
        data: bytes | BinaryIO,
        content_type: str | None = None,
    ) -> StoredFile:
        """
        Store content under a newly generated id.

        Args:
            data: File content as bytes or a readable binary stream.
            content_type: MIME type of the content, if known.

        Returns:
            StoredFile handle for the new content.

        Raises:
            StorageError: If the upload fails.
        """
        ...

    @abstractmethod
    def open(self, id: str) -> BinaryIO:
        """
        Open a readable binary stream for a stored file.

        Args:
            id: Identifier of the file.

        Returns:
            A binary stream positioned at the start of the content.

        Raises:
            FileNotFoundError: If no file is stored under the id.
        """
        ...

    @abstractmethod
    def size(self, id: str) -> int:
        """
        Get the size of a stored file in bytes.

        Raises:
            FileNotFoundError: If no file is stored under the id.
        """
        ...

    @abstractmethod
    def type(self, id: str) -> str:
        """
        Get the best-effort MIME type of a stored file.

        Raises:
            FileNotFoundError: If no file is stored under the id.
        """
        ...

    @abstractmethod
    def delete(self, id: str) -> None:
        """
        Permanently remove a stored file.

        Raises:
            FileNotFoundError: If no file is stored under the id.
        """
        ...

    @abstractmethod
    def exists(self, id: str) -> bool:
        """
        Check if a file is stored under the id.

        Never raises for a missing id.
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every file held by this backend."""
        ...

    def get(self, id: str) -> StoredFile:
        """
        Get a handle for an existing id.

        Storage is not contacted; a handle for a missing id only fails
        once it is used.
        """
        return StoredFile(self, id)

    def read(self, id: str) -> bytes:
        """Read the full content of a stored file."""
        stream = self.open(id)
        try:
            return stream.read()
        finally:
            stream.close()

    def generate_id(self, content_type: str | None = None) -> str:
        """
        Generate a unique id for new content.

        Args:
            content_type: When given, a matching file extension is appended
                so the type can be recovered from the id alone.

        Returns:
            Generated unique id.
        """
        unique_id = uuid.uuid4().hex

        if content_type:
            extension = mimetypes.guess_extension(content_type)
            if extension:
                return f"{unique_id}{extension}"
        return unique_id

    @staticmethod
    def guess_type(id: str) -> str:
        """Guess content type from the id's extension."""
        content_type, _ = mimetypes.guess_type(id)
        return content_type or DEFAULT_CONTENT_TYPE
