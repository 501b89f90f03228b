from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol


Headers = Dict[str, str]


@dataclass(slots=True)
class Envelope:
    payload: Any
    headers: Headers = field(default_factory=dict)
    subject: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = "v1"


@dataclass(slots=True)
class PublishResult:
    topic: str
    message_id: str


class Serializer(Protocol):
    def dumps(self, obj: Any) -> bytes: ...


class PublishMiddleware(Protocol):
    def before_publish(self, topic: str, env: Envelope) -> Envelope: ...

    def after_publish(self, topic: str, env: Envelope, result: PublishResult) -> None: ...


class Publisher(abc.ABC):
    @abc.abstractmethod
    def publish(self, topic: str, env: Envelope) -> PublishResult: ...

    @abc.abstractmethod
    def close(self) -> None: ...
