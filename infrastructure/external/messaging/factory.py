from __future__ import annotations

from typing import Any, List, Optional

from .base import PublishMiddleware, Publisher, Serializer
from .config import MessagingConfig
from .providers.sns.publisher import SnsPublisher


def create_publisher(
    cfg: MessagingConfig,
    serializer: Serializer,
    middlewares: Optional[List[PublishMiddleware]] = None,
    client: Any = None,
) -> Publisher:
    if cfg.provider == "sns":
        return SnsPublisher(cfg.sns, serializer, middlewares, client=client)
    raise ValueError(f"Unsupported provider: {cfg.provider}")
