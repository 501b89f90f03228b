"""Storage exceptions.

Every failure that crosses the storage boundary is a ``StorageError``; the
subclasses only refine the ``error_type`` reported to clients.
"""
from __future__ import annotations

from typing import Optional

from domain.common.exceptions import BusinessException
from shared.codes import BusinessCode


class StorageError(BusinessException):
    """Base storage exception."""

    error_type = "StorageError"

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(
            code=BusinessCode.STORAGE_ERROR,
            message=message,
            error_type=self.error_type,
            details=details,
        )


class NotFoundError(StorageError):
    """Bucket or object not found."""

    error_type = "NotFound"


class PermissionDeniedError(StorageError):
    """Permission denied for storage operation."""

    error_type = "PermissionDenied"


class TransientError(StorageError):
    """Transient error (network, rate limit, server error)."""

    error_type = "TransientError"


class ConfigurationError(StorageError):
    """Storage configuration error."""

    error_type = "ConfigurationError"


class ValidationError(StorageError):
    """Object metadata or content failed validation."""

    error_type = "ValidationError"
