from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional


@dataclass(slots=True)
class SnsConfig:
    region: str = "eu-west-2"
    endpoint: Optional[str] = None  # e.g. LocalStack
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    timeout: int = 30
    max_retry_attempts: int = 3


@dataclass(slots=True)
class MessagingConfig:
    provider: Literal["sns"] = "sns"
    sns: SnsConfig = field(default_factory=SnsConfig)
    delete_event_topic: Optional[str] = None
