"""Blob Store - 上传文件的磁盘存储"""

import logging
import re
import shutil
import time
from pathlib import Path
from typing import BinaryIO

from app.config import UPLOADS_URL_PREFIX
from app.errors import InternalError
from app.models.schemas import StoredFile

logger = logging.getLogger(__name__)

# Windows 保留字符与控制字符
_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
# 按 UTF-8 字节计，加上时间戳前缀仍低于常见文件系统的 255 字节限制
_MAX_NAME_BYTES = 200


def decode_transport_filename(name: str) -> str:
    """还原按 latin1 解码的 UTF-8 文件名。

    部分 multipart 实现把 filename 的原始字节按 latin1 解码，中文文件名会变成
    乱码（如 "åº”ç”¨.apk"）。若文本能以 latin1 编码回字节且这些字节是合法的
    UTF-8，则返回 UTF-8 解读；否则原样返回（已正确解码的名字会在 latin1
    编码或 UTF-8 解码阶段失败）。
    """
    try:
        return name.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return name


def sanitize_filename(name: str) -> str:
    """去掉目录部分并替换不安全字符"""
    base = re.split(r"[/\\]", name)[-1]
    base = _UNSAFE_CHARS.sub("_", base).strip().lstrip(".")
    if not base:
        return "upload"
    # 保留末尾以保住扩展名，丢弃被截断的半个字符
    base = base.encode("utf-8")[-_MAX_NAME_BYTES:].decode("utf-8", "ignore")
    return base or "upload"


class BlobStore:
    """存储服务：管理 uploads 目录中的二进制文件"""

    def __init__(self, uploads_dir: str | Path = "data/uploads") -> None:
        self.uploads_dir = Path(uploads_dir)

    def _ensure_directories(self) -> None:
        """创建 uploads 目录（可重复调用）"""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def relative_path_for(self, filename: str) -> str:
        """构造对外访问路径 /uploads/{filename}"""
        return UPLOADS_URL_PREFIX + filename

    def path_for(self, relative_path: str) -> Path:
        """把 /uploads/{filename} 解析为磁盘路径。

        Raises:
            ValueError: 路径不在 uploads 目录下
        """
        if not relative_path.startswith(UPLOADS_URL_PREFIX):
            raise ValueError(f"不是上传文件路径: {relative_path}")

        filename = relative_path[len(UPLOADS_URL_PREFIX):]
        path = self.uploads_dir / filename
        if not filename or path.resolve().parent != self.uploads_dir.resolve():
            raise ValueError(f"非法的上传文件路径: {relative_path}")
        return path

    def save(self, name_hint: str | None, byte_stream: BinaryIO) -> StoredFile:
        """保存上传文件，文件名为 {毫秒时间戳}-{清理后的原始文件名}。

        1. 确保 uploads 目录存在
        2. 还原原始文件名编码并清理
        3. 写入 data/uploads/{ms}-{name}，同名时时间戳递增
        """
        self._ensure_directories()

        raw_name = name_hint or ""
        safe_name = sanitize_filename(decode_transport_filename(raw_name))

        prefix = int(time.time() * 1000)
        path = self.uploads_dir / f"{prefix}-{safe_name}"
        while path.exists():
            prefix += 1
            path = self.uploads_dir / f"{prefix}-{safe_name}"

        try:
            out = open(path, "xb")
        except OSError as e:
            raise InternalError(f"保存上传文件失败: {e}") from e

        try:
            with out:
                shutil.copyfileobj(byte_stream, out)
                size = out.tell()
        except OSError as e:
            path.unlink(missing_ok=True)
            raise InternalError(f"保存上传文件失败: {e}") from e

        logger.info("Stored upload %s (%d bytes)", path.name, size)
        return StoredFile(
            filename=path.name,
            relative_path=self.relative_path_for(path.name),
            size=size,
            original_name=raw_name,
        )

    def delete(self, relative_path: str) -> None:
        """删除文件，文件不存在时不报错"""
        path = self.path_for(relative_path)
        path.unlink(missing_ok=True)
