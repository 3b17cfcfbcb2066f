"""Storage backends and file handles for memory, local filesystem and S3."""

from depot.services.storage.base import StorageBackend
from depot.services.storage.factory import get_backend_registry
from depot.services.storage.file import StoredFile
from depot.services.storage.registry import BackendRegistry

__all__ = ["BackendRegistry", "StorageBackend", "StoredFile", "get_backend_registry"]
