"""AWS S3 object store gateway."""
from typing import Optional, Any
import anyio
from functools import partial

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from core.logging_config import get_logger
from domain.storage import ObjectVersion
from domain.storage.exceptions import (
    StorageError,
    ConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    TransientError,
)
from ..config import StorageConfig

logger = get_logger(__name__)

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NoSuchBucket", "NotFound")
_ALREADY_EXISTS_CODES = ("BucketAlreadyOwnedByYou", "BucketAlreadyExists")


def _error_code(e: Exception) -> str:
    return getattr(e, "response", {}).get("Error", {}).get("Code", "")


def _error_message(e: Exception) -> str:
    message = getattr(e, "response", {}).get("Error", {}).get("Message")
    return message or str(e)


class S3ObjectStore:
    """Thin pass-through over a boto3 S3 client.

    The client is blocking, so every call runs in a worker thread. Buckets
    are addressed per call; one gateway serves any number of buckets.
    """

    def __init__(
        self,
        client: Any,  # boto3 S3 client
        config: StorageConfig
    ):
        """Initialize S3 gateway.

        Args:
            client: Boto3 S3 client instance
            config: Storage configuration
        """
        self.client = client
        self.config = config
        self.region = config.region or "us-east-1"

    async def ensure_bucket(self, bucket: str) -> None:
        """Create ``bucket`` unless it already exists."""
        try:
            await anyio.to_thread.run_sync(
                partial(self.client.head_bucket, Bucket=bucket)
            )
            return
        except ClientError as e:
            if _error_code(e) not in _NOT_FOUND_CODES:
                self._handle_exception(e, f"head bucket {bucket}")
        except BotoCoreError as e:
            self._handle_exception(e, f"head bucket {bucket}")

        args: dict[str, Any] = {"Bucket": bucket}
        if self.region != "us-east-1":
            args["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        try:
            await anyio.to_thread.run_sync(
                partial(self.client.create_bucket, **args)
            )
            logger.info("bucket_created", bucket=bucket)
        except ClientError as e:
            # Lost a creation race against another caller
            if _error_code(e) in _ALREADY_EXISTS_CODES:
                logger.info("bucket_already_exists", bucket=bucket)
                return
            self._handle_exception(e, f"create bucket {bucket}")
        except BotoCoreError as e:
            self._handle_exception(e, f"create bucket {bucket}")

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        metadata: dict[str, str],
        content_length: int,
    ) -> dict:
        """Upload content and metadata, replacing whatever is at ``key``."""
        try:
            response = await anyio.to_thread.run_sync(
                partial(
                    self.client.put_object,
                    Bucket=bucket,
                    Key=key,
                    Body=body,
                    Metadata=metadata,
                    ContentLength=content_length,
                )
            )
            logger.info("object_put", bucket=bucket, key=key, size=content_length)
            return response or {}
        except (ClientError, BotoCoreError) as e:
            self._handle_exception(e, f"put {bucket}/{key}")

    async def get_object(self, bucket: str, key: str) -> bytes:
        """Download the full object content."""
        try:
            response = await anyio.to_thread.run_sync(
                partial(self.client.get_object, Bucket=bucket, Key=key)
            )
            body = response["Body"]
            try:
                data = await anyio.to_thread.run_sync(body.read)
                logger.info("object_downloaded", bucket=bucket, key=key, size=len(data))
                return data
            finally:
                # Release the pooled connection even if read fails
                await anyio.to_thread.run_sync(body.close)
        except (ClientError, BotoCoreError) as e:
            self._handle_exception(e, f"get {bucket}/{key}")

    async def head_metadata(self, bucket: str, key: str) -> dict[str, str]:
        """User metadata of ``key`` without transferring content."""
        try:
            response = await anyio.to_thread.run_sync(
                partial(self.client.head_object, Bucket=bucket, Key=key)
            )
            return dict(response.get("Metadata") or {})
        except (ClientError, BotoCoreError) as e:
            self._handle_exception(e, f"head {bucket}/{key}")

    async def find_metadata(self, bucket: str, key: str) -> Optional[dict[str, str]]:
        """Like ``head_metadata`` but ``None`` when the object does not exist."""
        try:
            response = await anyio.to_thread.run_sync(
                partial(self.client.head_object, Bucket=bucket, Key=key)
            )
            return dict(response.get("Metadata") or {})
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            self._handle_exception(e, f"head {bucket}/{key}")
        except BotoCoreError as e:
            self._handle_exception(e, f"head {bucket}/{key}")

    async def list_objects(self, bucket: str, prefix: str) -> list[str]:
        """Keys under ``prefix``. Only the first page is returned."""
        try:
            response = await anyio.to_thread.run_sync(
                partial(self.client.list_objects_v2, Bucket=bucket, Prefix=prefix)
            )
        except (ClientError, BotoCoreError) as e:
            self._handle_exception(e, f"list objects {bucket}/{prefix}")

        if response.get("IsTruncated"):
            # TODO: follow ContinuationToken once callers need more than one page
            logger.warning("object_listing_truncated", bucket=bucket, prefix=prefix)
        return [obj["Key"] for obj in response.get("Contents", [])]

    async def delete_object(self, bucket: str, key: str, version_id: Optional[str] = None) -> None:
        """Delete the current object, or one historical version."""
        args: dict[str, Any] = {"Bucket": bucket, "Key": key}
        if version_id is not None:
            args["VersionId"] = version_id
        try:
            await anyio.to_thread.run_sync(
                partial(self.client.delete_object, **args)
            )
            logger.info("object_deleted", bucket=bucket, key=key, version_id=version_id)
        except (ClientError, BotoCoreError) as e:
            self._handle_exception(e, f"delete {bucket}/{key}")

    async def list_versions(self, bucket: str, key: str) -> list[ObjectVersion]:
        try:
            response = await anyio.to_thread.run_sync(
                partial(self.client.list_object_versions, Bucket=bucket, Prefix=key)
            )
        except (ClientError, BotoCoreError) as e:
            self._handle_exception(e, f"list versions {bucket}/{key}")

        # Prefix matching also returns siblings such as "<key>.bak"
        return [
            ObjectVersion(version_id=v["VersionId"], is_latest=bool(v.get("IsLatest")))
            for v in response.get("Versions", [])
            if v.get("Key") == key
        ]

    async def is_versioning_enabled(self, bucket: str) -> bool:
        try:
            response = await anyio.to_thread.run_sync(
                partial(self.client.get_bucket_versioning, Bucket=bucket)
            )
        except (ClientError, BotoCoreError) as e:
            self._handle_exception(e, f"get versioning {bucket}")
        return response.get("Status") == "Enabled"

    async def health_check(self) -> bool:
        """Check S3 connectivity."""
        try:
            await anyio.to_thread.run_sync(self.client.list_buckets)
            logger.info("S3 health check passed")
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 health check failed", error=str(e))
            return False

    def _handle_exception(self, e: Exception, operation: str) -> None:
        """Map S3 exceptions to storage exceptions."""
        error_code = _error_code(e)
        message = f"{_error_message(e)} ({operation})"

        if error_code in _NOT_FOUND_CODES:
            raise NotFoundError(message) from e
        elif error_code in ["AccessDenied", "403"]:
            raise PermissionDeniedError(message) from e
        elif error_code in ["RequestTimeout", "SlowDown", "ServiceUnavailable"]:
            raise TransientError(message) from e
        else:
            raise StorageError(message) from e


def build_s3_client(config: StorageConfig) -> Any:
    """Build a boto3 S3 client from configuration."""
    if not config.region or not config.region.strip():
        raise ConfigurationError("AWS region is not configured", details={"setting": "AWS__REGION"})

    boto_config = BotoConfig(
        region_name=config.region,
        signature_version="s3v4",
        retries={
            "max_attempts": config.max_retry_attempts,
            "mode": "standard"
        },
        connect_timeout=config.timeout,
        read_timeout=config.timeout
    )

    client_args: dict[str, Any] = {
        "service_name": "s3",
        "config": boto_config
    }

    if config.aws_access_key_id and config.aws_secret_access_key:
        client_args.update({
            "aws_access_key_id": config.aws_access_key_id,
            "aws_secret_access_key": config.aws_secret_access_key
        })

    if config.endpoint:
        client_args["endpoint_url"] = config.endpoint
        client_args["use_ssl"] = config.enable_ssl

    return boto3.client(**client_args)


async def build_s3_store(config: StorageConfig) -> S3ObjectStore:
    """Build S3 object store gateway.

    Args:
        config: Storage configuration

    Returns:
        Configured gateway instance
    """
    store = S3ObjectStore(build_s3_client(config), config)

    # Connectivity problems are reported, not fatal: credentials may be
    # scoped to individual buckets without ListAllMyBuckets.
    await store.health_check()
    return store
