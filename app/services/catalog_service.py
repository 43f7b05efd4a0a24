"""Catalog Service - 应用目录的增删改查"""

import logging
import time
from typing import Any, Callable

from app.config import UPLOADS_URL_PREFIX
from app.errors import NotFoundError
from app.models.schemas import StoredFile, UploadResult
from app.services.blob_store import BlobStore, decode_transport_filename
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class CatalogService:
    """应用目录服务：组合 RecordStore 和 BlobStore。

    每个操作都是一次完整的"读取全部 → 修改 → 写回全部"。记录按最新优先排列，
    id 和 updateTime 由服务端分配，客户端传入的值会被覆盖。
    """

    def __init__(
        self,
        records: RecordStore,
        blobs: BlobStore,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.records = records
        self.blobs = blobs
        self._clock = clock or _now_ms
        self._last_id = 0

    def _new_id(self, apps: list[dict]) -> str:
        """毫秒时间戳作为 id，与已有 id 冲突时递增"""
        taken = {str(a.get("id")) for a in apps}
        candidate = max(self._clock(), self._last_id + 1)
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    @staticmethod
    def _find_index(apps: list[dict], app_id: str) -> int:
        for index, app in enumerate(apps):
            if app.get("id") == app_id:
                return index
        return -1

    def list_apps(self) -> list[dict]:
        return self.records.load_all()

    def create_app(self, fields: dict[str, Any]) -> dict:
        """新建应用记录并插入到列表头部"""
        apps = self.records.load_all()
        new_app = {
            **fields,
            "id": self._new_id(apps),
            "updateTime": self._clock(),
        }
        apps.insert(0, new_app)
        self.records.save_all(apps)
        logger.info("Created app %s", new_app["id"])
        return new_app

    def update_app(self, app_id: str, fields: dict[str, Any]) -> dict:
        """浅合并更新字段，id 保持不变，刷新 updateTime。

        Raises:
            NotFoundError: 不存在该 id 的记录
        """
        apps = self.records.load_all()
        index = self._find_index(apps, app_id)
        if index == -1:
            raise NotFoundError("App not found")

        apps[index] = {
            **apps[index],
            **fields,
            "id": app_id,
            "updateTime": self._clock(),
        }
        self.records.save_all(apps)
        logger.info("Updated app %s", app_id)
        return apps[index]

    def delete_app(self, app_id: str) -> None:
        """删除记录及其上传文件；记录不存在时直接返回成功。

        文件删除失败只记录日志，不影响记录删除。
        """
        apps = self.records.load_all()
        index = self._find_index(apps, app_id)

        if index != -1:
            download_url = apps[index].get("downloadUrl")
            if isinstance(download_url, str) and download_url.startswith(UPLOADS_URL_PREFIX):
                try:
                    self.blobs.delete(download_url)
                except (OSError, ValueError) as e:
                    logger.warning("Failed to delete blob %s of app %s: %s", download_url, app_id, e)

        remaining = [a for a in apps if a.get("id") != app_id]
        self.records.save_all(remaining)
        logger.info("Deleted app %s", app_id)

    def record_upload(self, stored: StoredFile) -> UploadResult:
        """由保存结果生成上传响应，不写入记录"""
        return UploadResult(
            url=stored.relative_path,
            size=stored.size,
            original_name=decode_transport_filename(stored.original_name),
        )
