"""应用目录与上传路由"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, UploadFile

from app.dependencies import get_blobs, get_catalog, require_token
from app.errors import ValidationError
from app.responses import ok_response
from app.services.blob_store import BlobStore
from app.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["apps"])


@router.get("/apps")
async def list_apps(catalog: CatalogService = Depends(get_catalog)):
    """获取应用列表（最新优先）。downloadUrl 为相对路径，由客户端拼接完整地址。"""
    return ok_response(catalog.list_apps())


@router.post("/upload", dependencies=[Depends(require_token)])
async def upload_file(
    file: UploadFile | None = None,
    blobs: BlobStore = Depends(get_blobs),
    catalog: CatalogService = Depends(get_catalog),
):
    """上传 APK 文件，返回下载地址；不会创建应用记录。"""
    logger.info("Upload request received")
    if file is None:
        logger.info("No file in request")
        raise ValidationError("No file uploaded")

    stored = blobs.save(file.filename, file.file)
    result = catalog.record_upload(stored)
    logger.info("Upload success: %s", result.url)
    return ok_response(result.model_dump(by_alias=True))


@router.post("/apps", dependencies=[Depends(require_token)])
async def create_app(
    fields: dict[str, Any] = Body(default={}),
    catalog: CatalogService = Depends(get_catalog),
):
    """新增应用，插入到列表头部。"""
    return ok_response(catalog.create_app(fields))


@router.put("/apps/{app_id}", dependencies=[Depends(require_token)])
async def update_app(
    app_id: str,
    fields: dict[str, Any] = Body(default={}),
    catalog: CatalogService = Depends(get_catalog),
):
    """更新应用（浅合并），id 不可修改。"""
    return ok_response(catalog.update_app(app_id, fields))


@router.delete("/apps/{app_id}", dependencies=[Depends(require_token)])
async def delete_app(app_id: str, catalog: CatalogService = Depends(get_catalog)):
    """删除应用及其上传的文件；不存在的 id 同样返回成功。"""
    catalog.delete_app(app_id)
    return ok_response(message="Deleted")
