"""Pytest bootstrap configuration.

Ensure environment variables are set before test collection and module
imports that depend on application settings.
"""
import os

import pytest

os.environ.setdefault("AWS__REGION", "eu-west-2")
os.environ.setdefault("AWS__ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS__SECRET_ACCESS_KEY", "test")
os.environ.setdefault("SNS__DELETE_EVENT_TOPIC_ARN", "arn:aws:sns:eu-west-2:000000000000:object-deleted")

from application.services.storage_service import StorageApplicationService  # noqa: E402
from infrastructure.external.storage.config import StorageConfig  # noqa: E402
from infrastructure.external.storage.providers.s3 import S3ObjectStore  # noqa: E402
from tests.fakes import FakeS3Client, RecordingNotifier  # noqa: E402


@pytest.fixture
def s3_client() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def store(s3_client) -> S3ObjectStore:
    return S3ObjectStore(s3_client, StorageConfig(region="eu-west-2"))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(store, notifier) -> StorageApplicationService:
    return StorageApplicationService(store=store, notifier=notifier)
