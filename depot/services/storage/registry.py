"""
Named registry of storage backends.

Maps names to backend instances and back. The reverse direction is what
lets a URL name the backend a file lives in, so one backend instance may
only be registered under a single name.
"""

from collections.abc import ItemsView, Iterator

from depot.core.exceptions import BackendNotRegisteredError, ConfigurationError
from depot.services.storage.base import StorageBackend


class BackendRegistry:
    """Bidirectional mapping between backend names and instances."""

    def __init__(self, backends: dict[str, StorageBackend] | None = None) -> None:
        self._backends: dict[str, StorageBackend] = {}
        self._names: dict[int, str] = {}
        for name, backend in (backends or {}).items():
            self.register(name, backend)

    def register(self, name: str, backend: StorageBackend) -> None:
        """
        Register a backend under a name, replacing any previous entry.

        Raises:
            ConfigurationError: If the backend is already registered under
                a different name.
        """
        existing = self._names.get(id(backend))
        if existing is not None and existing != name:
            raise ConfigurationError(
                message=f"Backend already registered as '{existing}'",
                details={"name": name, "existing": existing},
            )

        if name in self._backends:
            self.unregister(name)

        self._backends[name] = backend
        self._names[id(backend)] = name

    def unregister(self, name: str) -> StorageBackend:
        """Remove and return the backend registered under a name."""
        backend = self.get(name)
        del self._backends[name]
        del self._names[id(backend)]
        return backend

    def get(self, name: str) -> StorageBackend:
        try:
            return self._backends[name]
        except KeyError:
            raise BackendNotRegisteredError(
                message=f"No backend registered as '{name}'",
                details={"name": name},
            ) from None

    def name_for(self, backend: StorageBackend) -> str:
        """Reverse lookup: the name a backend instance is registered under."""
        try:
            return self._names[id(backend)]
        except KeyError:
            raise BackendNotRegisteredError(
                message=f"{type(backend).__name__} instance is not registered",
                details={"backend": type(backend).__name__},
            ) from None

    def items(self) -> ItemsView[str, StorageBackend]:
        return self._backends.items()

    def __contains__(self, name: object) -> bool:
        return name in self._backends

    def __iter__(self) -> Iterator[str]:
        return iter(self._backends)

    def __len__(self) -> int:
        return len(self._backends)
