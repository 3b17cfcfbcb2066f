"""
Pytest configuration and fixtures.
"""

from typing import BinaryIO, Generator

import pytest

from depot.core.config import Settings
from depot.services.storage.factory import reset_backend_registry
from depot.services.storage.file import StoredFile
from depot.services.storage.memory import MemoryBackend
from depot.services.storage.registry import BackendRegistry
from depot.services.urls.builder import UrlBuilder
from depot.services.urls.factory import reset_url_builder
from depot.services.urls.signer import HmacSigner

TEST_SECRET = "test-secret-key-for-testing-only"


class CountingBackend(MemoryBackend):
    """Memory backend that records how often content is opened."""

    def __init__(self) -> None:
        super().__init__()
        self.open_calls = 0

    def put(self, id: str, content: bytes, content_type: str = "text/plain") -> StoredFile:
        """Store content under a fixed id."""
        self._files[id] = (content, content_type)
        return self.get(id)

    def open(self, id: str) -> BinaryIO:
        self.open_calls += 1
        return super().open(id)


# Test settings
@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Create test settings."""
    return Settings(
        app_env="development",
        secret_key=TEST_SECRET,
        host="https://files.example.com",
        mount_point="attachments",
        cache_backend="memory",
        store_backend="local",
        local_storage_path=str(tmp_path / "storage"),
        log_format="console",
    )


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Drop cached registries and builders between tests."""
    reset_backend_registry()
    reset_url_builder()
    yield
    reset_backend_registry()
    reset_url_builder()


@pytest.fixture
def backend() -> CountingBackend:
    """Return an empty counting memory backend."""
    return CountingBackend()


@pytest.fixture
def stored_file(backend: CountingBackend) -> StoredFile:
    """Return a handle for 'hello' stored as text/plain under 'abc123'."""
    return backend.put("abc123", b"hello", "text/plain")


@pytest.fixture
def registry(backend: CountingBackend) -> BackendRegistry:
    """Return a registry with the counting backend registered as 'store'."""
    return BackendRegistry({"cache": MemoryBackend(), "store": backend})


@pytest.fixture
def signer() -> HmacSigner:
    return HmacSigner(TEST_SECRET)


@pytest.fixture
def url_builder(registry: BackendRegistry, signer: HmacSigner) -> UrlBuilder:
    """Return a URL builder with a default host and mount point."""
    return UrlBuilder(
        registry=registry,
        signer=signer,
        host="https://files.example.com",
        mount_point="attachments",
    )
