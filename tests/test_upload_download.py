import pytest

from domain.storage import NotFoundError, StorageError, StorageRequest, UploadedFile, ValidationError
from tests.fakes import client_error


def _upload_request(*files, custom=None, bucket="b1", folder="uploads"):
    return StorageRequest(
        bucket_name=bucket,
        folder_path=folder,
        custom_metadata=custom,
        files=list(files),
    )


@pytest.mark.asyncio
async def test_upload_then_download_round_trip(service, s3_client):
    content = b'{"answer":42,"uploadedBy":"Marvin"}'
    results = await service.upload(_upload_request(UploadedFile("test.json", content)))

    assert len(results) == 1
    assert results[0].key == "uploads/test.json"
    assert results[0].size == len(content)
    assert results[0].etag

    downloaded = await service.download(StorageRequest(bucket_name="b1", key="uploads/test.json"))
    assert downloaded == content
    assert await service.get_data(StorageRequest(bucket_name="b1", key="uploads/test.json")) == content.decode()
    assert all(body.closed for body in s3_client.bodies)


@pytest.mark.asyncio
async def test_upload_creates_missing_bucket_once(service, s3_client):
    await service.upload(_upload_request(UploadedFile("a.txt", b"a"), UploadedFile("b.txt", b"bb")))

    assert "b1" in s3_client.buckets
    assert len(s3_client.called("create_bucket")) == 1
    assert s3_client.called("create_bucket")[0]["CreateBucketConfiguration"] == {"LocationConstraint": "eu-west-2"}
    assert sorted(s3_client.buckets["b1"].objects) == ["uploads/a.txt", "uploads/b.txt"]


@pytest.mark.asyncio
async def test_upload_into_existing_bucket_does_not_create(service, s3_client):
    s3_client.add_bucket("b1")
    await service.upload(_upload_request(UploadedFile("a.txt", b"a")))
    assert s3_client.called("create_bucket") == []


@pytest.mark.asyncio
async def test_upload_writes_system_and_custom_metadata(service, s3_client):
    await service.upload(
        _upload_request(
            UploadedFile("test.json", b"{}"),
            custom={"deletetype": "PARTIAL", "fixedfields": "id"},
        )
    )
    put = s3_client.called("put_object")[0]
    assert put["Metadata"] == {"deletetype": "PARTIAL", "fixedfields": "id", "name": "test.json", "type": "json"}
    assert put["ContentLength"] == 2


@pytest.mark.asyncio
async def test_reupload_carries_existing_metadata_forward(service, s3_client):
    s3_client.seed("b1", "uploads/test.json", b"{}", {"owner": "alice", "name": "stale"})

    await service.upload(_upload_request(UploadedFile("test.json", b'{"v":2}')))

    current = s3_client.current("b1", "uploads/test.json")
    assert current.body == b'{"v":2}'
    assert current.metadata == {"owner": "alice", "name": "test.json", "type": "json"}


@pytest.mark.asyncio
async def test_upload_failure_keeps_earlier_files(service, s3_client, monkeypatch):
    s3_client.add_bucket("b1")
    first = UploadedFile("a.txt", b"a")
    second = UploadedFile("b.txt", b"b")
    original_put = s3_client.put_object

    def flaky_put(**kwargs):
        if kwargs["Key"] == "uploads/b.txt":
            raise client_error("InternalError", "PutObject", "boom", 500)
        return original_put(**kwargs)

    monkeypatch.setattr(s3_client, "put_object", flaky_put)

    with pytest.raises(StorageError):
        await service.upload(_upload_request(first, second))
    assert list(s3_client.buckets["b1"].objects) == ["uploads/a.txt"]


@pytest.mark.asyncio
async def test_upload_requires_files(service):
    with pytest.raises(ValidationError):
        await service.upload(_upload_request())


@pytest.mark.asyncio
async def test_download_missing_key_is_not_found(service, s3_client):
    s3_client.add_bucket("b1")
    with pytest.raises(NotFoundError) as info:
        await service.download(StorageRequest(bucket_name="b1", key="uploads/missing.json"))
    assert "get b1/uploads/missing.json" in info.value.message


@pytest.mark.asyncio
async def test_list_files_reads_metadata_and_sorts(service, s3_client):
    s3_client.seed("b1", "f/b.json", b"{}", {"name": "b.json", "type": "json", "owner": "x"})
    s3_client.seed("b1", "f/raw", b"", {})
    s3_client.seed("b1", "f/a.txt", b"", {"name": "a.txt", "type": "txt"})
    s3_client.seed("b1", "other/c.json", b"{}", {"name": "c.json"})

    listed = await service.list_files(StorageRequest(bucket_name="b1", folder_path="f"), sort="fileName,desc")

    assert [s.key for s in listed] == ["f/b.json", "f/a.txt", "f/raw"]
    assert listed[0].custom_metadata is None
    assert s3_client.called("list_objects_v2")[0]["Prefix"] == "f/"


@pytest.mark.asyncio
async def test_list_files_includes_metadata_on_request(service, s3_client):
    s3_client.seed("b1", "f/b.json", b"{}", {"name": "b.json", "owner": "x"})

    listed = await service.list_files(StorageRequest(bucket_name="b1", folder_path="f"), include_metadata=True)

    assert listed[0].custom_metadata == {"name": "b.json", "owner": "x"}
    assert listed[0].model_dump(by_alias=True) == {
        "bucketName": "b1",
        "key": "f/b.json",
        "fileName": "b.json",
        "customMetadata": {"name": "b.json", "owner": "x"},
    }


@pytest.mark.asyncio
async def test_custom_metadata_survives_upload_then_list(service, s3_client):
    await service.upload(
        _upload_request(
            UploadedFile("test.json", b'{"answer":42}'),
            custom={"answer": 42, "uploadedBy": "Marvin"},
        )
    )

    listed = await service.list_files(StorageRequest(bucket_name="b1", folder_path="uploads"), include_metadata=True)

    assert len(listed) == 1
    assert listed[0].file_name == "test.json"
    assert listed[0].file_type == "json"
    assert listed[0].custom_metadata == {
        "answer": "42",
        "uploadedby": "Marvin",
        "name": "test.json",
        "type": "json",
    }


@pytest.mark.asyncio
async def test_non_ascii_filename_is_rejected_before_any_write(service, s3_client):
    with pytest.raises(ValidationError):
        await service.upload(_upload_request(UploadedFile("résumé.pdf", b"%PDF")))
    assert s3_client.called("put_object") == []


@pytest.mark.asyncio
async def test_list_files_empty_folder(service, s3_client):
    s3_client.add_bucket("b1")
    assert await service.list_files(StorageRequest(bucket_name="b1", folder_path="empty")) == []
