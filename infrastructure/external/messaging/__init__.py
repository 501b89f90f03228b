from typing import Optional

from core.config import settings
from core.logging_config import get_logger

from .base import (
    Envelope,
    PublishResult,
    Publisher,
    PublishMiddleware,
    Serializer,
)
from .config import MessagingConfig, SnsConfig
from .config_builder import messaging_config_from_settings
from .factory import create_publisher
from .middlewares.logging import LoggingMiddleware
from .notifier import DeleteEventNotifier
from .serializers.json import JsonSerializer

logger = get_logger(__name__)

_publisher: Optional[Publisher] = None
_notifier: Optional[DeleteEventNotifier] = None


def init_messaging() -> None:
    """Create the SNS publisher and the delete-event notifier."""
    global _publisher, _notifier

    if _notifier is not None:
        logger.warning("Messaging already initialized")
        return

    cfg = messaging_config_from_settings(settings.aws, settings.sns)
    _publisher = create_publisher(cfg, JsonSerializer(), [LoggingMiddleware()])
    _notifier = DeleteEventNotifier(_publisher, cfg.delete_event_topic)
    if not cfg.delete_event_topic:
        logger.warning("delete_event_topic_missing", message="SNS__DELETE_EVENT_TOPIC_ARN not set")
    logger.info("Messaging initialized", provider=cfg.provider, topic=cfg.delete_event_topic)


def get_delete_notifier() -> DeleteEventNotifier:
    """FastAPI dependency for the delete-event notifier.

    Without initialisation the notifier has no publisher and only logs.
    """
    return _notifier if _notifier is not None else DeleteEventNotifier(None, None)


def shutdown_messaging() -> None:
    global _publisher, _notifier
    try:
        if _publisher is not None:
            _publisher.close()
            logger.info("Messaging shutdown")
    except Exception as e:
        logger.error("Error during messaging shutdown", error=str(e))
    finally:
        _publisher = None
        _notifier = None


__all__ = [
    "Envelope",
    "PublishResult",
    "Publisher",
    "PublishMiddleware",
    "Serializer",
    "MessagingConfig",
    "SnsConfig",
    "JsonSerializer",
    "LoggingMiddleware",
    "DeleteEventNotifier",
    "create_publisher",
    "messaging_config_from_settings",
    "init_messaging",
    "get_delete_notifier",
    "shutdown_messaging",
]
