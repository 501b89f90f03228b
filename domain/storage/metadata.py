"""Translation between object user-metadata and structured fields.

S3 user metadata is a flat ``str -> str`` mapping whose keys come back
lower-cased, so every recognised key here is lower-case too.
"""
from __future__ import annotations

from os.path import splitext
from typing import Mapping, Optional

from .entity import DeleteType, FileSummary, LifecycleState
from .exceptions import ValidationError

NAME = "name"
TYPE = "type"
DELETE_TYPE = "deletetype"
FIXED_FIELDS = "fixedfields"
LIFECYCLE_STATE = "lifecyclestate"

JSON_TYPE = "json"


def decode_delete_type(metadata: Mapping[str, str]) -> DeleteType:
    """PARTIAL only for an exact ``"PARTIAL"``; anything else is HARD."""
    if metadata.get(DELETE_TYPE) == DeleteType.PARTIAL.value:
        return DeleteType.PARTIAL
    return DeleteType.HARD


def decode_fixed_fields(metadata: Mapping[str, str]) -> list[str]:
    """Split ``fixedfields`` into field names.

    Raises:
        ValidationError: the key is missing or holds no field names.
    """
    raw = metadata.get(FIXED_FIELDS)
    fields = [f.strip() for f in (raw or "").split(",") if f.strip()]
    if not fields:
        raise ValidationError(
            f"Partial delete requires '{FIXED_FIELDS}' metadata",
            details={"metadata_key": FIXED_FIELDS},
        )
    return fields


def build_summary(
    bucket_name: str,
    key: str,
    metadata: Mapping[str, str],
    include_custom: bool,
) -> FileSummary:
    return FileSummary(
        bucket_name=bucket_name,
        key=key,
        file_name=metadata.get(NAME),
        file_type=metadata.get(TYPE),
        custom_metadata=dict(metadata) if include_custom else None,
    )


def with_lifecycle_state(metadata: Mapping[str, str], state: LifecycleState) -> dict[str, str]:
    """Full copy of ``metadata`` with the lifecycle marker overwritten."""
    updated = dict(metadata)
    updated[LIFECYCLE_STATE] = state.value
    return updated


def file_type_of(filename: str) -> str:
    return splitext(filename)[1].lstrip(".")


def build_upload_metadata(
    existing: Optional[Mapping[str, str]],
    custom: Optional[Mapping[str, str]],
    filename: str,
) -> dict[str, str]:
    """Metadata for a (re-)upload.

    Layered as: metadata of the object already at the key, then the caller's
    custom metadata, then the system ``name``/``type`` entries. Keys are
    lower-cased first, as S3 stores them, so a custom ``Type`` cannot sit
    beside the system ``type``.

    Raises:
        ValidationError: a key or value is not ASCII, which S3 user metadata
            cannot carry.
    """
    metadata: dict[str, str] = {str(k).lower(): str(v) for k, v in (existing or {}).items()}
    metadata.update({str(k).lower(): str(v) for k, v in (custom or {}).items()})
    metadata[NAME] = filename
    metadata[TYPE] = file_type_of(filename)
    _require_ascii(metadata)
    return metadata


def _require_ascii(metadata: Mapping[str, str]) -> None:
    for key, value in metadata.items():
        if not (key.isascii() and value.isascii()):
            raise ValidationError(
                f"S3 metadata only allows ASCII; '{key}' has non-ASCII characters",
                details={"metadata_key": key},
            )
