"""Port for delete-event notification.

Implementations never raise: the return value tells the caller whether the
event left the process, and the caller decides what to do with it.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.storage import DeleteEvent


@runtime_checkable
class DeleteNotifierPort(Protocol):
    async def publish_delete_event(self, event: DeleteEvent) -> bool: ...
