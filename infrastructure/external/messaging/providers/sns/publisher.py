from __future__ import annotations

from typing import Any, List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ...base import Envelope, PublishMiddleware, PublishResult, Publisher, Serializer
from ...config import SnsConfig
from ...exceptions import PublishError


def _to_message_attributes(headers: dict[str, str]) -> dict[str, dict[str, str]]:
    return {k: {"DataType": "String", "StringValue": v} for k, v in headers.items()}


def build_sns_client(cfg: SnsConfig) -> Any:
    client_args: dict[str, Any] = {
        "service_name": "sns",
        "region_name": cfg.region,
        "config": BotoConfig(
            retries={"max_attempts": cfg.max_retry_attempts, "mode": "standard"},
            connect_timeout=cfg.timeout,
            read_timeout=cfg.timeout,
        ),
    }
    if cfg.access_key_id and cfg.secret_access_key:
        client_args["aws_access_key_id"] = cfg.access_key_id
        client_args["aws_secret_access_key"] = cfg.secret_access_key
    if cfg.endpoint:
        client_args["endpoint_url"] = cfg.endpoint
    return boto3.client(**client_args)


class SnsPublisher(Publisher):
    """Publishes envelopes to SNS topics; ``topic`` is the topic ARN."""

    def __init__(
        self,
        cfg: SnsConfig,
        serializer: Serializer,
        middlewares: Optional[List[PublishMiddleware]] = None,
        client: Any = None,
    ) -> None:
        self.cfg = cfg
        self.serializer = serializer
        self.middlewares = middlewares or []
        self._client = client if client is not None else build_sns_client(cfg)

    def publish(self, topic: str, env: Envelope) -> PublishResult:
        for m in self.middlewares:
            env = m.before_publish(topic, env)

        value = env.payload if isinstance(env.payload, (bytes, bytearray)) else self.serializer.dumps(env.payload)
        request: dict[str, Any] = {
            "TopicArn": topic,
            "Message": bytes(value).decode("utf-8"),
        }
        if env.subject:
            request["Subject"] = env.subject
        if env.headers:
            request["MessageAttributes"] = _to_message_attributes(env.headers)

        try:
            response = self._client.publish(**request)
        except (ClientError, BotoCoreError) as e:
            raise PublishError(f"Failed to publish to SNS topic '{topic}': {e}", topic=topic) from e

        result = PublishResult(topic=topic, message_id=response.get("MessageId", ""))
        for m in self.middlewares:
            m.after_publish(topic, env, result)
        return result

    def close(self) -> None:
        self._client.close()
