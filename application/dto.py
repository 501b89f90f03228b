"""
数据传输对象（DTO）- 应用层与表现层之间的数据传输
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from domain.storage import FileSummary, UploadResult


class DTOBase(BaseModel):
    """对外输出统一使用 camelCase，空值字段不输出"""

    model_config = ConfigDict(populate_by_name=True)

    @model_serializer(mode="wrap")
    def _serialize_model(self, handler):  # type: ignore[override]
        data = handler(self)
        return {k: v for k, v in data.items() if v is not None}


class FileSummaryDTO(DTOBase):
    """列表项"""
    bucket_name: str = Field(..., alias="bucketName")
    key: str
    file_name: Optional[str] = Field(None, alias="fileName")
    file_type: Optional[str] = Field(None, alias="fileType")
    custom_metadata: Optional[dict[str, str]] = Field(None, alias="customMetadata")

    @classmethod
    def from_domain(cls, summary: FileSummary) -> "FileSummaryDTO":
        return cls(
            bucket_name=summary.bucket_name,
            key=summary.key,
            file_name=summary.file_name,
            file_type=summary.file_type,
            custom_metadata=summary.custom_metadata,
        )


class UploadResultDTO(DTOBase):
    """上传结果"""
    bucket_name: str = Field(..., alias="bucketName")
    key: str
    size: int
    etag: Optional[str] = None
    version_id: Optional[str] = Field(None, alias="versionId")

    @classmethod
    def from_domain(cls, result: UploadResult) -> "UploadResultDTO":
        return cls(
            bucket_name=result.bucket_name,
            key=result.key,
            size=result.size,
            etag=result.etag,
            version_id=result.version_id,
        )
