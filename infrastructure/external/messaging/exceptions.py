from __future__ import annotations

from typing import Optional


class MessagingError(Exception):
    """Base error of the messaging layer."""


class SerializationError(MessagingError):
    """Payload could not be encoded for the wire."""


class PublishError(MessagingError):
    def __init__(self, message: str, topic: Optional[str] = None) -> None:
        super().__init__(message)
        self.topic = topic
