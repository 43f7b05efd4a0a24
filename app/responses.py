"""统一响应格式：成功 {code: 0, data}，失败 {code: <HTTP 状态码>, message}"""

from typing import Any

from fastapi.responses import JSONResponse


def ok_response(data: Any = None, message: str | None = None) -> dict:
    """Build a success payload."""
    body: dict[str, Any] = {"code": 0}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={"code": status_code, "message": message},
    )
