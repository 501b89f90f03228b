import json

import pytest

from domain.storage import DeleteEvent, DeleteType
from infrastructure.external.messaging import (
    DeleteEventNotifier,
    Envelope,
    JsonSerializer,
    LoggingMiddleware,
    MessagingConfig,
    SnsConfig,
    create_publisher,
    messaging_config_from_settings,
)
from infrastructure.external.messaging.exceptions import PublishError
from tests.fakes import FakeSnsClient, client_error

TOPIC = "arn:aws:sns:eu-west-2:000000000000:object-deleted"


def _publisher(client):
    return create_publisher(MessagingConfig(sns=SnsConfig()), JsonSerializer(), [LoggingMiddleware()], client=client)


def test_sns_publisher_sends_compact_json_with_attributes():
    client = FakeSnsClient()
    result = _publisher(client).publish(
        TOPIC, Envelope(payload={"bucket": "b", "key": "k", "deleteType": "HARD"}, headers={"eventType": "delete"})
    )

    assert result.message_id == "msg-1"
    request = client.published[0]
    assert request["TopicArn"] == TOPIC
    assert request["Message"] == '{"bucket":"b","key":"k","deleteType":"HARD"}'
    assert request["MessageAttributes"] == {"eventType": {"DataType": "String", "StringValue": "delete"}}
    assert "Subject" not in request


def test_sns_publisher_wraps_client_errors():
    client = FakeSnsClient(error=client_error("NotFound", "Publish", "Topic does not exist", 404))
    with pytest.raises(PublishError):
        _publisher(client).publish(TOPIC, Envelope(payload={"a": 1}))


def test_unsupported_provider():
    with pytest.raises(ValueError):
        create_publisher(MessagingConfig(provider="kafka"), JsonSerializer())  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_notifier_publishes_partial_event():
    client = FakeSnsClient()
    notifier = DeleteEventNotifier(_publisher(client), TOPIC)

    event = DeleteEvent(bucket="b", key="k", delete_type=DeleteType.PARTIAL, fixed_fields=["id", "lifecycleState"])
    assert await notifier.publish_delete_event(event) is True

    message = json.loads(client.published[0]["Message"])
    assert message == {"bucket": "b", "key": "k", "deleteType": "PARTIAL", "fixedFields": ["id", "lifecycleState"]}


@pytest.mark.asyncio
async def test_notifier_swallows_publish_failures():
    client = FakeSnsClient(error=client_error("Throttling", "Publish", "Rate exceeded", 400))
    notifier = DeleteEventNotifier(_publisher(client), TOPIC)

    event = DeleteEvent(bucket="b", key="k", delete_type=DeleteType.HARD)
    assert await notifier.publish_delete_event(event) is False


@pytest.mark.asyncio
async def test_notifier_without_topic_does_not_publish():
    client = FakeSnsClient()
    notifier = DeleteEventNotifier(_publisher(client), None)

    event = DeleteEvent(bucket="b", key="k", delete_type=DeleteType.HARD)
    assert await notifier.publish_delete_event(event) is False
    assert client.published == []


def test_config_builder_maps_settings():
    from core.config import AwsSettings, SnsSettings

    cfg = messaging_config_from_settings(
        AwsSettings(region="eu-west-1", endpoint="http://localhost:4566", timeout=5),
        SnsSettings(delete_event_topic_arn=""),
    )
    assert cfg.provider == "sns"
    assert cfg.sns.region == "eu-west-1"
    assert cfg.sns.endpoint == "http://localhost:4566"
    assert cfg.sns.timeout == 5
    assert cfg.delete_event_topic is None


def test_publisher_close_closes_client():
    client = FakeSnsClient()
    _publisher(client).close()
    assert client.closed
