"""Domain types for objects held in the storage backend."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional


class DeleteType(str, enum.Enum):
    HARD = "HARD"
    PARTIAL = "PARTIAL"


class LifecycleState(str, enum.Enum):
    """Lifecycle markers written by this service.

    Other values found in metadata or content are opaque and passed through.
    """

    DELETED = "DELETED"


@dataclass
class UploadedFile:
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class StorageRequest:
    """Addressing and payload of a single storage operation."""

    bucket_name: str
    folder_path: Optional[str] = None
    key: Optional[str] = None
    custom_metadata: Optional[dict[str, str]] = None
    files: list[UploadedFile] = field(default_factory=list)

    @property
    def prefix(self) -> str:
        return f"{self.folder_path}/"

    def key_for(self, filename: str) -> str:
        return f"{self.folder_path}/{filename}"


@dataclass
class FileSummary:
    """Read-only projection of one listed object."""

    bucket_name: str
    key: str
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    custom_metadata: Optional[dict[str, str]] = None


@dataclass
class UploadResult:
    bucket_name: str
    key: str
    size: int
    etag: Optional[str] = None
    version_id: Optional[str] = None


@dataclass
class ObjectVersion:
    version_id: str
    is_latest: bool


@dataclass
class DeleteEvent:
    """Message emitted once per successful delete."""

    bucket: str
    key: str
    delete_type: DeleteType
    fixed_fields: Optional[list[str]] = None

    def to_message(self) -> dict[str, Any]:
        message: dict[str, Any] = {
            "bucket": self.bucket,
            "key": self.key,
            "deleteType": self.delete_type.value,
        }
        if self.fixed_fields is not None:
            message["fixedFields"] = list(self.fixed_fields)
        return message
