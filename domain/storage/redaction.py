"""In-place redaction of JSON object content for partial deletes."""
from __future__ import annotations

import json
from typing import Iterable

from .entity import LifecycleState
from .exceptions import StorageError, ValidationError

CONTENT_LIFECYCLE_FIELD = "lifecycleState"


def redact_json(content: str, fixed_fields: Iterable[str]) -> str:
    """Keep only the top-level ``fixed_fields`` and mark the document deleted.

    >>> redact_json('{"id":"1","lifecycleState":"SUBMITTED","forename":"x"}', ["id", "lifecycleState"])
    '{"id":"1","lifecycleState":"DELETED"}'
    """
    try:
        document = json.loads(content)
    except ValueError as e:
        raise StorageError(f"Object content is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise ValidationError("Partial delete of JSON content requires a top-level object")

    keep = set(fixed_fields)
    redacted = {name: value for name, value in document.items() if name in keep}
    redacted[CONTENT_LIFECYCLE_FIELD] = LifecycleState.DELETED.value
    return json.dumps(redacted, separators=(",", ":"), ensure_ascii=False)
