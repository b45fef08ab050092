"""
Custom exceptions for database and object storage operations.
"""
from rentops.core.exceptions import MaintenanceError


class BackendError(MaintenanceError):
    """Base exception for backend-as-a-service errors."""


class BackendConnectionError(BackendError):
    """Raised when an SDK client cannot be constructed."""


class RecordQueryError(BackendError):
    """Raised when a table select fails."""


class RecordUpdateError(BackendError):
    """Raised when a table update, insert or delete fails."""


class StorageError(BackendError):
    """Base exception for object storage errors."""


class StorageListError(StorageError):
    """Raised when a folder listing fails."""


class StorageDeleteError(StorageError):
    """Raised when a remove call fails."""
