"""Delete-event notification over the messaging publisher.

Publishing is best effort: failures are logged here and reported to the
caller as ``False``; they never propagate.
"""
from __future__ import annotations

from functools import partial
from typing import Optional

import anyio

from core.logging_config import get_logger
from domain.storage import DeleteEvent

from .base import Envelope, Publisher

logger = get_logger(__name__)


class DeleteEventNotifier:
    def __init__(self, publisher: Optional[Publisher], topic: Optional[str]) -> None:
        self._publisher = publisher
        self._topic = topic

    async def publish_delete_event(self, event: DeleteEvent) -> bool:
        if self._publisher is None or not self._topic:
            logger.warning(
                "delete_event_not_published",
                reason="no delete-event topic configured",
                bucket=event.bucket,
                key=event.key,
            )
            return False

        env = Envelope(payload=event.to_message(), headers={"eventType": "delete"})
        try:
            await anyio.to_thread.run_sync(partial(self._publisher.publish, self._topic, env))
        except Exception:  # noqa: BLE001
            logger.error(
                "delete_event_publish_failed",
                topic=self._topic,
                bucket=event.bucket,
                key=event.key,
                exc_info=True,
            )
            return False

        logger.info(
            "delete_event_published",
            bucket=event.bucket,
            key=event.key,
            delete_type=event.delete_type.value,
        )
        return True
