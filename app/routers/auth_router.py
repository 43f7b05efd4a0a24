"""登录路由"""

from fastapi import APIRouter, Depends

from app.dependencies import get_sessions
from app.models.schemas import LoginRequest, TokenData
from app.responses import ok_response
from app.services.session_authority import SessionAuthority

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login")
async def login(
    request: LoginRequest,
    sessions: SessionAuthority = Depends(get_sessions),
):
    """管理员登录，返回 Bearer token。"""
    token = sessions.login(request.username, request.password)
    return ok_response(TokenData(token=token).model_dump())
