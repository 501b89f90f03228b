"""Storage client entry point and lifecycle management."""
from typing import Optional
from functools import lru_cache

from core.config import settings
from core.logging_config import get_logger
from .config import StorageConfig
from .providers.s3 import S3ObjectStore, build_s3_store

logger = get_logger(__name__)

# Global storage client instance
_storage_client: Optional[S3ObjectStore] = None


@lru_cache
def get_storage_config() -> StorageConfig:
    """Get storage configuration from settings.

    Assembles StorageConfig from core.config.settings to maintain
    single source of truth for configuration.

    Returns:
        Storage configuration instance
    """
    s = settings.aws
    return StorageConfig(
        region=s.region,
        endpoint=s.endpoint,
        aws_access_key_id=s.access_key_id,
        aws_secret_access_key=s.secret_access_key,
        max_retry_attempts=s.max_retry_attempts,
        timeout=s.timeout,
        enable_ssl=s.enable_ssl,
    )


async def init_storage_client() -> None:
    """Initialize storage client."""
    global _storage_client

    if _storage_client is not None:
        logger.warning("Storage client already initialized")
        return

    try:
        config = get_storage_config()
        _storage_client = await build_s3_store(config)
        logger.info(
            "Storage client initialized",
            region=config.region,
            endpoint=config.endpoint,
        )
    except Exception as e:
        logger.error("Failed to initialize storage client", error=str(e))
        raise


def get_storage_client() -> Optional[S3ObjectStore]:
    """Get storage client instance.

    Returns:
        Storage gateway instance or None if not initialized
    """
    return _storage_client


async def shutdown_storage_client() -> None:
    """Shutdown storage client."""
    global _storage_client

    if _storage_client is None:
        return

    try:
        _storage_client.client.close()
        logger.info("Storage client shutdown")
    except Exception as e:
        logger.error("Error during storage shutdown", error=str(e))
    finally:
        _storage_client = None


async def get_storage() -> S3ObjectStore:
    """FastAPI dependency for storage gateway.

    Raises:
        RuntimeError: If storage not initialized
    """
    client = get_storage_client()
    if client is None:
        raise RuntimeError(
            "Storage client not initialized. "
            "Call init_storage_client() during startup."
        )
    return client


__all__ = [
    "init_storage_client",
    "get_storage_client",
    "shutdown_storage_client",
    "get_storage",
    "get_storage_config",
    "StorageConfig",
    "S3ObjectStore",
]
