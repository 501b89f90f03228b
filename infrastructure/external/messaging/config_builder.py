from __future__ import annotations

"""Messaging config builder (composition root for messaging layer).

This module maps application settings (AWS + SNS subsets) to the
MessagingConfig dataclasses used by the messaging infrastructure.

Keeping this builder in the infrastructure layer avoids coupling core
configuration to specific providers and preserves layering (core -> infra).
"""

from typing import Optional, Protocol

from .config import MessagingConfig, SnsConfig


class AwsSettingsLike(Protocol):
    region: str
    endpoint: Optional[str]
    access_key_id: Optional[str]
    secret_access_key: Optional[str]
    timeout: int
    max_retry_attempts: int


class SnsSettingsLike(Protocol):
    delete_event_topic_arn: Optional[str]


def messaging_config_from_settings(aws: AwsSettingsLike, sns: SnsSettingsLike) -> MessagingConfig:
    """Build MessagingConfig from AWS/SNS settings-like objects.

    The function performs a simple field mapping and does not import from core.
    """
    return MessagingConfig(
        provider="sns",
        sns=SnsConfig(
            region=aws.region,
            endpoint=aws.endpoint,
            access_key_id=aws.access_key_id,
            secret_access_key=aws.secret_access_key,
            timeout=aws.timeout,
            max_retry_attempts=aws.max_retry_attempts,
        ),
        delete_event_topic=sns.delete_event_topic_arn or None,
    )


__all__ = ["messaging_config_from_settings", "AwsSettingsLike", "SnsSettingsLike"]
