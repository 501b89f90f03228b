"""Single-key sorting of file summaries from a ``"field,direction"`` spec."""
from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from typing import Callable, Iterable, Optional

from domain.storage import FileSummary

Accessor = Callable[[FileSummary], Optional[str]]

SORTABLE_FIELDS: dict[str, Accessor] = {
    "bucketName": attrgetter("bucket_name"),
    "bucket_name": attrgetter("bucket_name"),
    "key": attrgetter("key"),
    "fileName": attrgetter("file_name"),
    "file_name": attrgetter("file_name"),
    "fileType": attrgetter("file_type"),
    "file_type": attrgetter("file_type"),
}


@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool
    accessor: Accessor


def parse_sort(sort: Optional[str]) -> Optional[SortSpec]:
    """``None`` for blank, malformed or unknown-field specs.

    Only an exact ``desc`` sorts descending; ``DESC`` and other spellings sort
    ascending.
    """
    if sort is None or not sort.strip():
        return None
    tokens = [t.strip() for t in sort.split(",")]
    if len(tokens) != 2:
        return None
    field, direction = tokens
    accessor = SORTABLE_FIELDS.get(field)
    if accessor is None:
        return None
    return SortSpec(field=field, descending=direction == "desc", accessor=accessor)


def sort_summaries(summaries: Iterable[FileSummary], spec: Optional[SortSpec]) -> list[FileSummary]:
    """Stable sort by ``spec``; summaries without a value go last either way."""
    items = list(summaries)
    if spec is None:
        return items
    present = [s for s in items if spec.accessor(s) is not None]
    missing = [s for s in items if spec.accessor(s) is None]
    return sorted(present, key=spec.accessor, reverse=spec.descending) + missing
