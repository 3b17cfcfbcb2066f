"""
Storage backend factory.

Creates the configured backends and registers them under the default
names 'cache' and 'store'.
"""

from pathlib import Path

from depot.core.config import BackendType, Settings, get_settings
from depot.core.exceptions import ConfigurationError
from depot.services.storage.base import StorageBackend
from depot.services.storage.local import LocalStorageBackend
from depot.services.storage.memory import MemoryBackend
from depot.services.storage.registry import BackendRegistry
from depot.services.storage.s3 import S3StorageBackend

DEFAULT_BACKEND_NAMES = ("cache", "store")

# Singleton instance
_backend_registry: BackendRegistry | None = None


def _build_backend(name: str, backend_type: BackendType, settings: Settings) -> StorageBackend:
    if backend_type == "memory":
        return MemoryBackend()

    if backend_type == "local":
        return LocalStorageBackend(
            base_path=Path(settings.local_storage_path) / name,
        )

    if backend_type == "s3":
        if not settings.s3_access_key or not settings.s3_secret_key:
            raise ConfigurationError(
                message="S3 storage requires DEPOT_S3_ACCESS_KEY and DEPOT_S3_SECRET_KEY to be set",
                details={"backend": name},
            )

        return S3StorageBackend(
            bucket_name=settings.s3_bucket_name,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            prefix=name,
        )

    raise ConfigurationError(
        message=f"Unknown storage backend: {backend_type}",
        details={"backend": name},
    )


def get_backend_registry(settings: Settings | None = None) -> BackendRegistry:
    """
    Get the configured backend registry.

    Builds the 'cache' and 'store' backends from application settings on
    first use and caches the registry.

    Args:
        settings: Application settings. Uses default if None.

    Returns:
        Registry holding the configured backends.

    Raises:
        ConfigurationError: If a backend type is invalid or misconfigured.
    """
    global _backend_registry

    if _backend_registry is not None:
        return _backend_registry

    if settings is None:
        settings = get_settings()

    registry = BackendRegistry()
    for name in DEFAULT_BACKEND_NAMES:
        backend_type = getattr(settings, f"{name}_backend")
        registry.register(name, _build_backend(name, backend_type, settings))

    _backend_registry = registry
    return _backend_registry


def reset_backend_registry() -> None:
    """Reset the backend registry singleton (for testing)."""
    global _backend_registry
    _backend_registry = None


def create_storage_backend(
    backend_type: str,
    **kwargs: object,
) -> StorageBackend:
    """
    Create a storage backend with custom configuration.

    This function allows creating storage backends outside the default
    registry, useful for testing or multi-tenant scenarios.

    Args:
        backend_type: Type of backend ("memory", "local" or "s3").
        **kwargs: Backend-specific configuration.

    Returns:
        Configured StorageBackend instance.
    """
    if backend_type == "memory":
        return MemoryBackend()

    elif backend_type == "local":
        base_path = kwargs.get("base_path", "/tmp/depot")
        return LocalStorageBackend(base_path=str(base_path))

    elif backend_type == "s3":
        return S3StorageBackend(
            bucket_name=str(kwargs.get("bucket_name", "")),
            access_key=kwargs.get("access_key"),  # type: ignore
            secret_key=kwargs.get("secret_key"),  # type: ignore
            region=str(kwargs.get("region", "us-east-1")),
            endpoint_url=kwargs.get("endpoint_url"),  # type: ignore
            prefix=str(kwargs.get("prefix", "")),
        )

    else:
        raise ConfigurationError(message=f"Unknown storage backend: {backend_type}")
