"""Storage domain exports."""
from .entity import (
    DeleteEvent,
    DeleteType,
    FileSummary,
    LifecycleState,
    ObjectVersion,
    StorageRequest,
    UploadedFile,
    UploadResult,
)
from .exceptions import (
    ConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    TransientError,
    ValidationError,
)

__all__ = [
    "DeleteEvent",
    "DeleteType",
    "FileSummary",
    "LifecycleState",
    "ObjectVersion",
    "StorageRequest",
    "UploadedFile",
    "UploadResult",
    "ConfigurationError",
    "NotFoundError",
    "PermissionDeniedError",
    "StorageError",
    "TransientError",
    "ValidationError",
]
