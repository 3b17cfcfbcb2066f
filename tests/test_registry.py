"""
Backend registry tests.
"""

import pytest

from depot.core.exceptions import BackendNotRegisteredError, ConfigurationError
from depot.services.storage.memory import MemoryBackend
from depot.services.storage.registry import BackendRegistry


def test_lookup_in_both_directions():
    backend = MemoryBackend()
    registry = BackendRegistry({"store": backend})

    assert registry.get("store") is backend
    assert registry.name_for(backend) == "store"


def test_reverse_lookup_is_by_identity():
    """Two distinct backends are never confused, even if they compare equal."""
    first, second = MemoryBackend(), MemoryBackend()
    registry = BackendRegistry({"cache": first, "store": second})

    assert registry.name_for(first) == "cache"
    assert registry.name_for(second) == "store"


def test_unknown_name_raises():
    with pytest.raises(BackendNotRegisteredError):
        BackendRegistry().get("store")


def test_unregistered_backend_raises():
    with pytest.raises(BackendNotRegisteredError) as exc_info:
        BackendRegistry().name_for(MemoryBackend())

    assert isinstance(exc_info.value, ConfigurationError)


def test_same_backend_under_two_names_is_rejected():
    backend = MemoryBackend()
    registry = BackendRegistry({"store": backend})

    with pytest.raises(ConfigurationError):
        registry.register("cache", backend)


def test_reregistering_name_replaces_backend():
    old, new = MemoryBackend(), MemoryBackend()
    registry = BackendRegistry({"store": old})

    registry.register("store", new)

    assert registry.get("store") is new
    assert registry.name_for(new) == "store"
    with pytest.raises(BackendNotRegisteredError):
        registry.name_for(old)


def test_unregister_removes_both_directions():
    backend = MemoryBackend()
    registry = BackendRegistry({"store": backend})

    assert registry.unregister("store") is backend
    assert "store" not in registry
    with pytest.raises(BackendNotRegisteredError):
        registry.name_for(backend)


def test_container_protocol():
    cache, store = MemoryBackend(), MemoryBackend()
    registry = BackendRegistry({"cache": cache, "store": store})

    assert len(registry) == 2
    assert list(registry) == ["cache", "store"]
    assert "cache" in registry
    assert dict(registry.items()) == {"cache": cache, "store": store}
