"""Application layer orchestration for stored objects (application/services).

Upload, download, listing and the delete lifecycle run here against the
``ObjectStorePort``; delete events go out through the ``DeleteNotifierPort``.
"""
from __future__ import annotations

from typing import Optional

from application.dto import FileSummaryDTO, UploadResultDTO
from application.ports.notification import DeleteNotifierPort
from application.ports.storage import ObjectStorePort
from application.utils.sorting import parse_sort, sort_summaries
from core.logging_config import get_logger
from domain.storage import (
    DeleteEvent,
    DeleteType,
    LifecycleState,
    StorageError,
    StorageRequest,
    UploadResult,
    ValidationError,
)
from domain.storage import metadata as codec
from domain.storage.redaction import redact_json

logger = get_logger(__name__)


def _require(value: Optional[str], name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"'{name}' is required", details={"field": name})
    return value


class StorageApplicationService:
    """High-level storage workflows bridging API and infrastructure."""

    def __init__(self, store: ObjectStorePort, notifier: DeleteNotifierPort):
        self._store = store
        self._notifier = notifier

    # ------------------------------------------------------------------
    # Upload / download
    # ------------------------------------------------------------------
    async def upload(self, request: StorageRequest) -> list[UploadResultDTO]:
        """Store every file under ``folder_path``; earlier files stay on a later failure."""
        bucket = _require(request.bucket_name, "bucketName")
        _require(request.folder_path, "folderPath")
        if not request.files:
            raise ValidationError("At least one file is required", details={"field": "files"})

        await self._store.ensure_bucket(bucket)

        results: list[UploadResultDTO] = []
        for upload in request.files:
            key = request.key_for(upload.filename)
            existing = await self._store.find_metadata(bucket, key)
            metadata = codec.build_upload_metadata(existing, request.custom_metadata, upload.filename)
            response = await self._store.put_object(
                bucket, key, upload.content, metadata, content_length=upload.size
            )
            result = UploadResult(
                bucket_name=bucket,
                key=key,
                size=upload.size,
                etag=response.get("ETag"),
                version_id=response.get("VersionId"),
            )
            logger.info(
                "object_uploaded",
                bucket=bucket,
                key=key,
                size=upload.size,
                replaced=existing is not None,
            )
            results.append(UploadResultDTO.from_domain(result))
        return results

    async def download(self, request: StorageRequest) -> bytes:
        bucket = _require(request.bucket_name, "bucketName")
        key = _require(request.key, "key")
        return await self._store.get_object(bucket, key)

    async def get_data(self, request: StorageRequest) -> str:
        content = await self.download(request)
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StorageError(f"Object content is not UTF-8 text: {e}") from e

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    async def list_files(
        self,
        request: StorageRequest,
        include_metadata: bool = False,
        sort: Optional[str] = None,
    ) -> list[FileSummaryDTO]:
        bucket = _require(request.bucket_name, "bucketName")
        _require(request.folder_path, "folderPath")

        keys = await self._store.list_objects(bucket, request.prefix)
        summaries = []
        for key in keys:
            metadata = await self._store.head_metadata(bucket, key)
            summaries.append(codec.build_summary(bucket, key, metadata, include_metadata))

        spec = parse_sort(sort)
        if spec is None and sort:
            logger.debug("sort_spec_ignored", sort=sort)
        return [FileSummaryDTO.from_domain(s) for s in sort_summaries(summaries, spec)]

    # ------------------------------------------------------------------
    # Delete lifecycle
    # ------------------------------------------------------------------
    async def delete(self, request: StorageRequest) -> None:
        """Delete ``key`` according to its ``deletetype`` metadata.

        HARD removes the object. PARTIAL redacts JSON content down to the
        ``fixedfields`` list, marks the object DELETED, rewrites it and prunes
        older versions when versioning is enabled. A delete event is published
        after either path succeeds; a publish failure does not fail the delete.

        Raises:
            StorageError: any failure before the event is published.
        """
        bucket = _require(request.bucket_name, "bucketName")
        key = _require(request.key, "key")

        try:
            metadata = await self._store.head_metadata(bucket, key)
            if codec.decode_delete_type(metadata) is DeleteType.PARTIAL:
                event = await self._partial_delete(bucket, key, metadata)
            else:
                event = await self._hard_delete(bucket, key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e

        published = await self._notifier.publish_delete_event(event)
        if not published:
            logger.warning(
                "delete_event_dropped",
                bucket=bucket,
                key=key,
                delete_type=event.delete_type.value,
            )

    async def _hard_delete(self, bucket: str, key: str) -> DeleteEvent:
        await self._store.delete_object(bucket, key)
        logger.info("object_hard_deleted", bucket=bucket, key=key)
        return DeleteEvent(bucket=bucket, key=key, delete_type=DeleteType.HARD)

    async def _partial_delete(self, bucket: str, key: str, metadata: dict[str, str]) -> DeleteEvent:
        # a missing fixedfields entry fails before the content is read; nothing is written
        fixed_fields = codec.decode_fixed_fields(metadata)

        body = await self._store.get_object(bucket, key)
        if metadata.get(codec.TYPE) == codec.JSON_TYPE:
            try:
                text = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise StorageError(f"Object content is not UTF-8 text: {e}") from e
            body = redact_json(text, fixed_fields).encode("utf-8")

        updated = codec.with_lifecycle_state(metadata, LifecycleState.DELETED)
        await self._store.put_object(bucket, key, body, updated, content_length=len(body))
        logger.info("object_partially_deleted", bucket=bucket, key=key, fixed_fields=fixed_fields)

        if await self._store.is_versioning_enabled(bucket):
            for version in await self._store.list_versions(bucket, key):
                if version.is_latest:
                    continue
                await self._store.delete_object(bucket, key, version_id=version.version_id)
                logger.info("object_version_pruned", bucket=bucket, key=key, version_id=version.version_id)

        return DeleteEvent(
            bucket=bucket,
            key=key,
            delete_type=DeleteType.PARTIAL,
            fixed_fields=fixed_fields,
        )
