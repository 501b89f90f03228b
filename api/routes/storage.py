"""对象存储相关路由。"""
from __future__ import annotations

import json
from typing import Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Query,
    UploadFile,
)
from fastapi.responses import Response as RawResponse

from api.dependencies import get_storage_service
from application.dto import FileSummaryDTO, UploadResultDTO
from application.services.storage_service import StorageApplicationService
from core.response import (
    Response as ApiResponse,
    success_response,
)
from domain.storage import StorageRequest, UploadedFile, ValidationError
from domain.storage.metadata import JSON_TYPE, file_type_of


router = APIRouter(
    prefix="/api/storage",
    tags=["对象存储"],
)


def _parse_custom_metadata(raw: Optional[str]) -> Optional[dict[str, str]]:
    """customMetadata 表单字段：JSON 对象字符串"""
    if raw is None or not raw.strip():
        return None
    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise ValidationError(f"customMetadata is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValidationError("customMetadata must be a JSON object")
    return {str(k): str(v) for k, v in parsed.items()}


@router.post(
    "/upload",
    summary="上传文件",
    response_model=ApiResponse[list[UploadResultDTO]],
)
async def upload_files(
    files: list[UploadFile] = File(..., description="要上传的文件"),
    bucket_name: str = Form(..., alias="bucketName"),
    folder_path: str = Form(..., alias="folderPath"),
    custom_metadata: Optional[str] = Form(None, alias="customMetadata"),
    service: StorageApplicationService = Depends(get_storage_service),
):
    uploads = [
        UploadedFile(
            filename=f.filename or "upload.bin",
            content=await f.read(),
            content_type=f.content_type,
        )
        for f in files
    ]
    request = StorageRequest(
        bucket_name=bucket_name,
        folder_path=folder_path,
        custom_metadata=_parse_custom_metadata(custom_metadata),
        files=uploads,
    )
    results = await service.upload(request)
    return success_response(data=results, message="File upload successful")


@router.get("/download", summary="下载文件")
async def download_file(
    bucket_name: str = Query(..., alias="bucketName"),
    key: str = Query(...),
    service: StorageApplicationService = Depends(get_storage_service),
):
    content = await service.download(StorageRequest(bucket_name=bucket_name, key=key))
    filename = key.rsplit("/", 1)[-1]
    return RawResponse(
        content=content,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/data", summary="读取文件内容")
async def get_data(
    bucket_name: str = Query(..., alias="bucketName"),
    key: str = Query(...),
    service: StorageApplicationService = Depends(get_storage_service),
):
    text = await service.get_data(StorageRequest(bucket_name=bucket_name, key=key))
    # 仅 .json 对象按 JSON 返回，其余按纯文本（starlette 自动追加 charset）
    is_json = file_type_of(key).lower() == JSON_TYPE
    return RawResponse(content=text, media_type="application/json" if is_json else "text/plain")


@router.get(
    "/list",
    summary="文件列表",
    response_model=ApiResponse[list[FileSummaryDTO]],
)
async def list_files(
    bucket_name: str = Query(..., alias="bucketName"),
    folder_path: str = Query(..., alias="folderPath"),
    include_metadata: bool = Query(False, alias="includeMetadata", description="是否返回全部元数据"),
    sort: Optional[str] = Query(None, description="排序，如 fileName,desc"),
    service: StorageApplicationService = Depends(get_storage_service),
):
    summaries = await service.list_files(
        StorageRequest(bucket_name=bucket_name, folder_path=folder_path),
        include_metadata=include_metadata,
        sort=sort,
    )
    return success_response(data=summaries)


@router.delete(
    "/delete",
    summary="删除文件",
    response_model=ApiResponse[None],
)
async def delete_file(
    bucket_name: str = Query(..., alias="bucketName"),
    key: str = Query(...),
    service: StorageApplicationService = Depends(get_storage_service),
):
    await service.delete(StorageRequest(bucket_name=bucket_name, key=key))
    return success_response(message=f"[{key}] deleted successfully.")
