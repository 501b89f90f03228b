from __future__ import annotations

import enum
import json
from datetime import datetime
from typing import Any

from ..exceptions import SerializationError


def _default(obj: Any) -> Any:
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class JsonSerializer:
    def dumps(self, obj: Any) -> bytes:
        try:
            return json.dumps(
                obj, separators=(",", ":"), ensure_ascii=False, default=_default
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e
