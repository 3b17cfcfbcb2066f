"""
Custom exceptions for Depot.

All exceptions inherit from DepotError and carry a stable error code and
details for consistent error reporting.
"""

from typing import Any


class DepotError(Exception):
    """Base exception for all Depot errors."""

    error_code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ) -> None:
        self.message = message or self.message
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for error reporting."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Resource Errors
# =============================================================================


class NotFoundError(DepotError):
    """Raised when a resource is not found."""

    error_code = "NOT_FOUND"
    message = "Resource not found"


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(DepotError):
    """Raised when storage operation fails."""

    error_code = "STORAGE_ERROR"
    message = "Storage operation failed"


class FileNotFoundError(StorageError, NotFoundError):
    """Raised when file is not found in storage."""

    error_code = "FILE_NOT_FOUND"
    message = "File not found in storage"

    def __init__(self, file_id: str, message: str | None = None) -> None:
        super().__init__(
            message=message or f"File not found: {file_id}",
            details={"id": file_id},
        )
        self.file_id = file_id


class StreamError(StorageError):
    """Raised when reading or copying a file stream fails."""

    error_code = "STREAM_ERROR"
    message = "Failed to read file stream"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DepotError):
    """Raised when a required setting is missing or invalid."""

    error_code = "CONFIGURATION_ERROR"
    message = "Invalid configuration"


class BackendNotRegisteredError(ConfigurationError):
    """Raised when a backend cannot be resolved in the registry."""

    error_code = "BACKEND_NOT_REGISTERED"
    message = "Backend is not registered"
