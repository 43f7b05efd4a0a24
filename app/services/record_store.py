"""Record Store - 基于单个 JSON 文件的应用记录存储"""

import json
import os
import tempfile
from pathlib import Path

from app.errors import CorruptStoreError, InternalError


class RecordStore:
    """整文件读写的记录存储。

    记录按最新优先的顺序保存在一个 JSON 数组中。每次写入都重写整个文件：
    先写临时文件再 os.replace，写入失败不会留下截断的 db.json。
    """

    def __init__(self, db_file: str | Path = "data/db.json") -> None:
        self.db_file = Path(db_file)

    def load_all(self) -> list[dict]:
        """读取全部记录，文件不存在时返回空列表。

        Raises:
            CorruptStoreError: 文件内容不是合法的 JSON 数组
        """
        if not self.db_file.exists():
            return []

        try:
            raw = self.db_file.read_bytes()
        except OSError as e:
            raise InternalError(f"读取 {self.db_file} 失败: {e}") from e

        try:
            records = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptStoreError(f"{self.db_file} 不是合法的 JSON: {e}") from e

        if not isinstance(records, list):
            raise CorruptStoreError(f"{self.db_file} 顶层必须是数组")
        return records

    def save_all(self, records: list[dict]) -> None:
        """格式化写入全部记录（indent=2，保留非 ASCII 字符）"""
        content = json.dumps(records, indent=2, ensure_ascii=False)

        try:
            self.db_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.db_file.parent, prefix=f".{self.db_file.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise InternalError(f"写入 {self.db_file} 失败: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.db_file)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise InternalError(f"写入 {self.db_file} 失败: {e}") from e
