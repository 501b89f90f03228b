"""Storage configuration models."""
from typing import Optional
from pydantic import BaseModel


class StorageConfig(BaseModel):
    """S3 client configuration."""
    region: str = "eu-west-2"
    endpoint: Optional[str] = None

    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    # Advanced settings (handled by botocore, not by this service)
    max_retry_attempts: int = 3
    timeout: int = 30
    enable_ssl: bool = True
