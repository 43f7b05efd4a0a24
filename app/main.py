"""APK Distribution Service - FastAPI 应用入口"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app import config
from app.errors import ServiceError
from app.responses import error_response
from app.routers.app_router import router as app_router
from app.routers.auth_router import router as auth_router
from app.routers.download_router import router as download_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用启动时确保上传目录存在"""
    from app import state

    state.blobs._ensure_directories()
    yield


app = FastAPI(
    title="APK Distribution Service",
    description="APK 分发后端 - 上传安装包、维护应用目录、提供下载地址",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS 中间件 - 允许所有来源（管理后台与客户端跨域访问）
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(auth_router)
app.include_router(app_router)
app.include_router(download_router)


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """业务异常 - 按异常类型映射 HTTP 状态码"""
    if exc.status_code >= 500:
        logger.error("Service error on %s: %s", request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求体校验失败 - 返回 400"""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(400, message)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """全局异常处理器 - 统一错误响应格式"""
    logger.exception("Unhandled exception: %s", exc)
    return error_response(500, str(exc))


@app.get("/health")
async def health_check():
    return {"status": "ok"}


# 管理后台静态资源，放在所有路由之后注册
if config.PUBLIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=config.PUBLIC_DIR, html=True), name="public")
