"""已上传文件的下载路由"""

import mimetypes

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.dependencies import get_blobs
from app.errors import NotFoundError
from app.services.blob_store import BlobStore

router = APIRouter(tags=["uploads"])

mimetypes.add_type("application/vnd.android.package-archive", ".apk")


@router.get("/uploads/{filename}")
async def download_file(filename: str, blobs: BlobStore = Depends(get_blobs)):
    """按扩展名返回上传的文件（不强制附件下载）。"""
    try:
        path = blobs.path_for(blobs.relative_path_for(filename))
    except ValueError:
        raise NotFoundError("File not found")

    if not path.is_file():
        raise NotFoundError("File not found")

    media_type, _ = mimetypes.guess_type(filename)
    return FileResponse(path=str(path), media_type=media_type or "application/octet-stream")
