"""
File handle for content held by a storage backend.

A StoredFile pairs a backend with an id. Metadata calls go straight to the
backend; a byte stream is only opened by the first operation that needs
content and is reused until the handle is closed.

A single handle is not safe to share between threads: the stream is opened
with an unguarded check-then-create.
"""

import shutil
import tempfile
import weakref
from collections.abc import Iterator, Sequence
from typing import IO, TYPE_CHECKING, Any, Protocol

from depot.core.exceptions import StreamError
from depot.core.logging import get_logger

if TYPE_CHECKING:
    from depot.services.storage.base import StorageBackend
    from depot.services.urls.builder import UrlBuilder

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


class Attacher(Protocol):
    """Supplies filename defaults for URLs built from a file."""

    basename: str | None
    extension: str | None


# Temporary copies created by make_tempfile(), tracked without keeping them alive
_tempfiles: "weakref.WeakSet[Any]" = weakref.WeakSet()


def make_tempfile(id: str) -> IO[bytes]:
    """Create a named temporary file to hold a local copy of a stored file."""
    tmp = tempfile.NamedTemporaryFile(prefix=id.replace("/", "_") + "-", mode="w+b")
    _tempfiles.add(tmp)
    return tmp


def is_tempfile(stream: Any) -> bool:
    """Check whether a stream is a temporary copy made by make_tempfile()."""
    return stream in _tempfiles


class StoredFile:
    """Handle for a file stored in a backend."""

    def __init__(
        self,
        backend: "StorageBackend",
        id: str,
        attacher: Attacher | None = None,
    ) -> None:
        """
        Initialize a file handle.

        Args:
            backend: Backend the file is stored in. Shared, not owned.
            id: Identifier of the file within the backend.
            attacher: Optional source of filename defaults for URLs.
        """
        self._backend = backend
        self._id = id
        self.attacher = attacher
        self._io: IO[bytes] | None = None

    @property
    def backend(self) -> "StorageBackend":
        """The backend the file is stored in."""
        return self._backend

    @property
    def id(self) -> str:
        """The id of the file."""
        return self._id

    # -------------------------------------------------------------------------
    # Stream access
    # -------------------------------------------------------------------------

    def to_io(self) -> IO[bytes]:
        """Get the file's byte stream, opening it on first use."""
        if self._io is None:
            self._io = self._backend.open(self._id)
        return self._io

    def read(self, size: int = -1) -> bytes:
        """
        Read from the file.

        Args:
            size: Maximum number of bytes to read. Reads to the end if negative.

        Returns:
            The bytes read; empty once the end has been reached.

        Raises:
            StreamError: If the underlying stream fails.
        """
        stream = self.to_io()
        try:
            return stream.read(size)
        except OSError as e:
            raise StreamError(
                message=f"Failed to read file: {e}",
                details={"id": self._id},
            ) from e

    def eof(self) -> bool:
        """Return True once all data has been read."""
        stream = self.to_io()
        try:
            peek = getattr(stream, "peek", None)
            if peek is not None:
                return not peek(1)
            if stream.seekable():
                position = stream.tell()
                at_end = not stream.read(1)
                stream.seek(position)
                return at_end
        except OSError as e:
            raise StreamError(
                message=f"Failed to check end of file: {e}",
                details={"id": self._id},
            ) from e

        raise StreamError(
            message="Stream supports neither peek nor seek",
            details={"id": self._id, "stream": type(stream).__name__},
        )

    def close(self) -> None:
        """Close the stream if one is open. Safe to call repeatedly."""
        if self._io is not None:
            stream, self._io = self._io, None
            stream.close()

    def download(self) -> IO[bytes]:
        """
        Download the file to a temporary file on disk.

        If the open stream already is a temporary file it is returned as is.
        Otherwise the content is copied into a new temporary file, which then
        replaces the stream, so repeated calls copy at most once. Seekable
        streams are copied from the start even after a partial read.

        Returns:
            A named temporary file positioned at the start of the content.

        Raises:
            StreamError: If copying the content fails.
        """
        stream = self.to_io()
        if is_tempfile(stream):
            return stream

        tmp = make_tempfile(self._id)
        try:
            if stream.seekable():
                stream.seek(0)
            shutil.copyfileobj(stream, tmp, CHUNK_SIZE)
            tmp.flush()
            copied = tmp.tell()
            tmp.seek(0)
        except OSError as e:
            tmp.close()
            raise StreamError(
                message=f"Failed to download file: {e}",
                details={"id": self._id},
            ) from e
        except BaseException:
            tmp.close()
            raise

        stream.close()
        self._io = tmp

        logger.debug("file_materialized", id=self._id, path=tmp.name, bytes=copied)
        return tmp

    # -------------------------------------------------------------------------
    # Backend delegation
    # -------------------------------------------------------------------------

    def size(self) -> int:
        """Size of the file in bytes."""
        return self._backend.size(self._id)

    def type(self) -> str:
        """Reported content type of the file."""
        return self._backend.type(self._id)

    def delete(self) -> None:
        """Remove the file from the backend."""
        self._backend.delete(self._id)

    def exists(self) -> bool:
        """Whether the file exists in the backend."""
        return self._backend.exists(self._id)

    # -------------------------------------------------------------------------
    # URLs
    # -------------------------------------------------------------------------

    def url(
        self,
        *segments: Any,
        builder: "UrlBuilder | None" = None,
        prefix: str | Sequence[str] | None = None,
        filename: str | None = None,
        format: str | None = None,
        host: str | None = None,
    ) -> str:
        """
        Build a signed URL for this file.

        Uses the application's default URL builder unless one is given.
        """
        if builder is None:
            from depot.services.urls.factory import get_url_builder

            builder = get_url_builder()

        return builder.build(
            self,
            *segments,
            prefix=prefix,
            filename=filename,
            format=format,
            host=host,
        )

    # -------------------------------------------------------------------------
    # Protocols
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[bytes]:
        while chunk := self.read(CHUNK_SIZE):
            yield chunk

    def __enter__(self) -> "StoredFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StoredFile):
            return NotImplemented
        return self._backend is other._backend and self._id == other._id

    def __hash__(self) -> int:
        return hash((self._backend, self._id))

    def __repr__(self) -> str:
        return f"<StoredFile backend={type(self._backend).__name__} id={self._id!r}>"
