"""Core module - Configuration, logging, and exceptions."""

from depot.core.config import Settings, get_settings
from depot.core.exceptions import (
    BackendNotRegisteredError,
    ConfigurationError,
    DepotError,
    FileNotFoundError,
    NotFoundError,
    StorageError,
    StreamError,
)

__all__ = [
    "Settings",
    "get_settings",
    "DepotError",
    "NotFoundError",
    "StorageError",
    "FileNotFoundError",
    "StreamError",
    "ConfigurationError",
    "BackendNotRegisteredError",
]
