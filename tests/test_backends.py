"""
Storage backend contract tests.

Every bundled backend except S3 runs against the same set of checks; S3 is
covered separately with a stubbed client.
"""

import io

import pytest

from depot.core.exceptions import FileNotFoundError as StorageFileNotFoundError
from depot.core.exceptions import ConfigurationError, StorageError
from depot.services.storage.base import StorageBackend
from depot.services.storage.factory import create_storage_backend
from depot.services.storage.file import StoredFile
from depot.services.storage.local import LocalStorageBackend
from depot.services.storage.memory import MemoryBackend


@pytest.fixture(params=["memory", "local"])
def storage(request, tmp_path) -> StorageBackend:
    """Return each backend implementation in turn."""
    if request.param == "memory":
        return MemoryBackend()
    return LocalStorageBackend(tmp_path / "store")


# =============================================================================
# Shared contract
# =============================================================================


def test_upload_returns_handle(storage: StorageBackend):
    file = storage.upload(b"hello", content_type="text/plain")

    assert isinstance(file, StoredFile)
    assert file.backend is storage
    assert storage.exists(file.id)


def test_upload_accepts_stream(storage: StorageBackend):
    file = storage.upload(io.BytesIO(b"streamed content"))

    assert storage.read(file.id) == b"streamed content"


def test_uploads_get_unique_ids(storage: StorageBackend):
    assert storage.upload(b"a").id != storage.upload(b"a").id


def test_size_and_type(storage: StorageBackend):
    file = storage.upload(b"hello", content_type="text/plain")

    assert storage.size(file.id) == 5
    assert storage.type(file.id) == "text/plain"


def test_type_defaults_to_octet_stream(storage: StorageBackend):
    file = storage.upload(b"\x00\x01")

    assert storage.type(file.id) == "application/octet-stream"


def test_open_returns_fresh_stream(storage: StorageBackend):
    file = storage.upload(b"hello")

    first = storage.open(file.id)
    first.read()
    second = storage.open(file.id)

    assert second.read() == b"hello"
    first.close()
    second.close()


def test_get_does_not_touch_storage(storage: StorageBackend):
    """A handle for a missing id can be created; using it fails."""
    file = storage.get("0" * 32)

    assert file.exists() is False
    with pytest.raises(StorageFileNotFoundError):
        file.read()


@pytest.mark.parametrize("operation", ["open", "size", "type", "delete"])
def test_missing_id_raises_not_found(storage: StorageBackend, operation: str):
    with pytest.raises(StorageFileNotFoundError):
        getattr(storage, operation)("0" * 32)


def test_delete(storage: StorageBackend):
    file = storage.upload(b"hello")

    storage.delete(file.id)

    assert storage.exists(file.id) is False
    with pytest.raises(StorageFileNotFoundError):
        storage.delete(file.id)


def test_clear_removes_everything(storage: StorageBackend):
    files = [storage.upload(b"one"), storage.upload(b"two")]

    storage.clear()

    assert not any(file.exists() for file in files)


def test_handle_round_trip(storage: StorageBackend):
    """Content uploaded through a backend reads back through its handle."""
    file = storage.upload(b"hello", content_type="text/plain")

    with storage.get(file.id) as handle:
        assert handle.size() == 5
        assert handle.read() == b"hello"
        assert handle.eof() is True
        with open(handle.download().name, "rb") as f:
            assert f.read() == b"hello"


# =============================================================================
# Local filesystem specifics
# =============================================================================


def test_local_backend_creates_base_path(tmp_path):
    base_path = tmp_path / "nested" / "store"

    LocalStorageBackend(base_path)

    assert base_path.is_dir()


def test_local_id_carries_extension(tmp_path):
    """The content type is recovered from the id's extension."""
    backend = LocalStorageBackend(tmp_path)

    file = backend.upload(b"{}", content_type="application/json")

    assert file.id.endswith(".json")
    assert (tmp_path / file.id).read_bytes() == b"{}"


@pytest.mark.parametrize("id", ["../escape", "nested/file", "a/../../escape"])
def test_local_rejects_path_traversal(tmp_path, id: str):
    backend = LocalStorageBackend(tmp_path / "store")

    with pytest.raises(StorageError) as exc_info:
        backend.open(id)

    assert exc_info.value.details["reason"] == "Path traversal detected"


@pytest.mark.parametrize("id", ["", "../escape", "nested/file"])
def test_local_exists_is_false_for_unstorable_ids(tmp_path, id: str):
    backend = LocalStorageBackend(tmp_path / "store")

    assert backend.exists(id) is False
    assert backend.get(id).exists() is False


def test_local_clear_keeps_base_path(tmp_path):
    backend = LocalStorageBackend(tmp_path / "store")
    backend.upload(b"hello")
    (backend.base_path / "leftover").mkdir()

    backend.clear()

    assert backend.base_path.is_dir()
    assert list(backend.base_path.iterdir()) == []


# =============================================================================
# Factory
# =============================================================================


def test_create_memory_backend():
    assert isinstance(create_storage_backend("memory"), MemoryBackend)


def test_create_local_backend(tmp_path):
    backend = create_storage_backend("local", base_path=tmp_path / "files")

    assert isinstance(backend, LocalStorageBackend)
    assert backend.base_path == (tmp_path / "files").resolve()


def test_create_unknown_backend():
    with pytest.raises(ConfigurationError):
        create_storage_backend("ftp")
