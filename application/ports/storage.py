"""Application-owned storage port abstraction (hexagonal architecture).

Defines the minimal methods needed by application use cases so that
the application layer does not depend on infrastructure details.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from domain.storage import ObjectVersion


@runtime_checkable
class ObjectStorePort(Protocol):
    async def ensure_bucket(self, bucket: str) -> None: ...

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        metadata: dict[str, str],
        content_length: int,
    ) -> dict: ...

    async def get_object(self, bucket: str, key: str) -> bytes: ...

    async def head_metadata(self, bucket: str, key: str) -> dict[str, str]: ...

    async def find_metadata(self, bucket: str, key: str) -> Optional[dict[str, str]]: ...

    async def list_objects(self, bucket: str, prefix: str) -> list[str]: ...

    async def delete_object(self, bucket: str, key: str, version_id: Optional[str] = None) -> None: ...

    async def list_versions(self, bucket: str, key: str) -> list[ObjectVersion]: ...

    async def is_versioning_enabled(self, bucket: str) -> bool: ...
