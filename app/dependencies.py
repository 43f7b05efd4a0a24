"""FastAPI 依赖：注入服务实例与 Bearer token 校验"""

import logging

from fastapi import Depends, Header

from app import state
from app.errors import AuthError
from app.services.blob_store import BlobStore
from app.services.catalog_service import CatalogService
from app.services.session_authority import SessionAuthority

logger = logging.getLogger(__name__)


def get_catalog() -> CatalogService:
    return state.catalog


def get_blobs() -> BlobStore:
    return state.blobs


def get_sessions() -> SessionAuthority:
    return state.sessions


def require_token(
    authorization: str | None = Header(default=None),
    sessions: SessionAuthority = Depends(get_sessions),
) -> str:
    """校验 Authorization: Bearer <token>，返回 token。

    Raises:
        AuthError: 缺少 Authorization 头或 token 无效
    """
    if not authorization:
        raise AuthError("No token provided")

    parts = authorization.split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not sessions.validate(token):
        logger.warning("Rejected request with invalid token")
        raise AuthError("Invalid token")
    return token
