import pytest
from botocore.exceptions import EndpointConnectionError

from domain.storage import (
    ConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    TransientError,
)
from infrastructure.external.storage.config import StorageConfig
from infrastructure.external.storage.providers.s3 import S3ObjectStore, build_s3_client
from tests.fakes import client_error


@pytest.mark.asyncio
async def test_ensure_bucket_is_idempotent(store, s3_client):
    await store.ensure_bucket("b1")
    await store.ensure_bucket("b1")

    assert len(s3_client.called("create_bucket")) == 1
    assert len(s3_client.called("head_bucket")) == 2


@pytest.mark.asyncio
async def test_ensure_bucket_in_us_east_1_omits_location(s3_client):
    store = S3ObjectStore(s3_client, StorageConfig(region="us-east-1"))
    await store.ensure_bucket("b1")
    assert s3_client.called("create_bucket")[0] == {"Bucket": "b1"}


@pytest.mark.asyncio
async def test_ensure_bucket_tolerates_creation_race(store, s3_client):
    s3_client.fail["head_bucket"] = client_error("NoSuchBucket", "HeadBucket", status=404)
    s3_client.add_bucket("b1")

    await store.ensure_bucket("b1")
    assert len(s3_client.called("create_bucket")) == 1


@pytest.mark.asyncio
async def test_ensure_bucket_propagates_other_errors(store, s3_client):
    s3_client.fail["head_bucket"] = client_error("AccessDenied", "HeadBucket", "Forbidden", 403)
    with pytest.raises(PermissionDeniedError):
        await store.ensure_bucket("b1")
    assert s3_client.called("create_bucket") == []


@pytest.mark.asyncio
async def test_find_metadata_returns_none_for_missing_key(store, s3_client):
    s3_client.add_bucket("b1")
    assert await store.find_metadata("b1", "nope") is None


@pytest.mark.asyncio
async def test_head_metadata_raises_for_missing_key(store, s3_client):
    s3_client.add_bucket("b1")
    with pytest.raises(NotFoundError):
        await store.head_metadata("b1", "nope")


@pytest.mark.parametrize(
    "code, expected",
    [
        ("NoSuchKey", NotFoundError),
        ("AccessDenied", PermissionDeniedError),
        ("SlowDown", TransientError),
        ("InternalError", StorageError),
    ],
)
@pytest.mark.asyncio
async def test_client_errors_are_mapped(store, s3_client, code, expected):
    s3_client.seed("b1", "k", b"x")
    s3_client.fail["get_object"] = client_error(code, "GetObject", "failed")

    with pytest.raises(expected) as info:
        await store.get_object("b1", "k")
    assert info.value.message == "failed (get b1/k)"


@pytest.mark.asyncio
async def test_connection_errors_become_storage_errors(store, s3_client):
    s3_client.fail["list_objects_v2"] = EndpointConnectionError(endpoint_url="http://localhost:4566")
    with pytest.raises(StorageError) as info:
        await store.list_objects("b1", "f/")
    assert isinstance(info.value.__cause__, EndpointConnectionError)


@pytest.mark.asyncio
async def test_truncated_listing_returns_first_page(store, s3_client, monkeypatch):
    monkeypatch.setattr(
        s3_client,
        "list_objects_v2",
        lambda **kwargs: {"IsTruncated": True, "Contents": [{"Key": "f/a"}], "NextContinuationToken": "t"},
    )
    assert await store.list_objects("b1", "f/") == ["f/a"]


@pytest.mark.asyncio
async def test_versioning_status(store, s3_client, monkeypatch):
    s3_client.add_bucket("on", versioning=True)
    s3_client.add_bucket("off")
    assert await store.is_versioning_enabled("on") is True
    assert await store.is_versioning_enabled("off") is False

    monkeypatch.setattr(s3_client, "get_bucket_versioning", lambda **kwargs: {"Status": "Suspended"})
    assert await store.is_versioning_enabled("on") is False


@pytest.mark.asyncio
async def test_list_versions_filters_prefix_siblings(store, s3_client):
    s3_client.add_bucket("b1", versioning=True)
    s3_client.seed("b1", "k", b"1")
    s3_client.seed("b1", "k", b"2")
    s3_client.seed("b1", "k2", b"3")

    versions = await store.list_versions("b1", "k")
    assert [v.is_latest for v in versions] == [False, True]


@pytest.mark.asyncio
async def test_health_check(store, s3_client):
    assert await store.health_check() is True
    s3_client.fail["list_buckets"] = client_error("AccessDenied", "ListBuckets", status=403)
    assert await store.health_check() is False


def test_build_s3_client_uses_endpoint_override():
    client = build_s3_client(
        StorageConfig(
            region="eu-west-2",
            endpoint="http://localhost:4566",
            aws_access_key_id="test",
            aws_secret_access_key="test",
            enable_ssl=False,
        )
    )
    assert client.meta.endpoint_url == "http://localhost:4566"
    assert client.meta.region_name == "eu-west-2"


@pytest.mark.parametrize("region", ["", "   "])
def test_build_s3_client_requires_region(region):
    with pytest.raises(ConfigurationError) as exc_info:
        build_s3_client(StorageConfig(region=region))
    assert exc_info.value.error_type == "ConfigurationError"
    assert exc_info.value.details == {"setting": "AWS__REGION"}
