"""APK 分发服务 - 数据模型定义"""

from pydantic import BaseModel, ConfigDict, Field


# === 认证模型 ===


class LoginRequest(BaseModel):
    """登录请求（缺失字段视为空字符串，按密码错误处理）"""

    username: str = ""
    password: str = ""


class TokenData(BaseModel):
    token: str


# === 文件模型 ===


class StoredFile(BaseModel):
    """BlobStore 保存结果"""

    filename: str = Field(..., description="磁盘上的文件名")
    relative_path: str = Field(..., description="对外访问路径 /uploads/{filename}")
    size: int
    original_name: str = Field(..., description="传输层给出的原始文件名（未解码）")


class UploadResult(BaseModel):
    """上传响应数据"""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    size: int
    original_name: str = Field(..., alias="originalName")

