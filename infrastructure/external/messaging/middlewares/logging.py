from __future__ import annotations

from typing import Any, Optional

from core.logging_config import get_logger

from ..base import Envelope, PublishMiddleware, PublishResult


class LoggingMiddleware(PublishMiddleware):
    def __init__(self, logger: Optional[Any] = None) -> None:
        self.log = logger or get_logger("messaging")

    def before_publish(self, topic: str, env: Envelope) -> Envelope:  # type: ignore[override]
        self.log.debug(
            "publishing",
            topic=topic,
            headers=list(env.headers.keys()),
        )
        return env

    def after_publish(self, topic: str, env: Envelope, result: PublishResult) -> None:  # type: ignore[override]
        self.log.info(
            "published",
            topic=topic,
            message_id=result.message_id,
        )
