"""业务异常定义 - 由 HTTP 层统一转换为 {code, message} 响应"""


class ServiceError(Exception):
    """所有业务异常的基类，携带对应的 HTTP 状态码"""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(ServiceError):
    """认证失败：缺少 token、token 无效或用户名密码错误"""

    status_code = 401


class InvalidCredentialsError(AuthError):
    pass


class ValidationError(ServiceError):
    """请求参数不合法（如未上传文件）"""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class CorruptStoreError(ServiceError):
    """db.json 内容无法解析"""

    status_code = 500


class InternalError(ServiceError):
    status_code = 500
