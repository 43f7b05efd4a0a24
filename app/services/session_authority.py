"""Session Authority - 内存中的登录 token 管理"""

import logging
import secrets
import threading

from app.errors import InvalidCredentialsError

logger = logging.getLogger(__name__)


class SessionAuthority:
    """单一管理员账号的会话管理。

    token 只保存在进程内存中，没有过期和注销，进程重启后全部失效。
    """

    def __init__(self, username: str, password: str) -> None:
        self._username = username
        self._password = password
        self._tokens: set[str] = set()
        self._lock = threading.Lock()

    def login(self, username: str, password: str) -> str:
        """校验账号密码，成功返回新 token。

        Raises:
            InvalidCredentialsError: 用户名或密码错误
        """
        user_ok = secrets.compare_digest(username.encode(), self._username.encode())
        password_ok = secrets.compare_digest(password.encode(), self._password.encode())
        if not (user_ok and password_ok):
            logger.warning("Login failed for user %r", username)
            raise InvalidCredentialsError("用户名或密码错误")

        token = secrets.token_hex(16)
        with self._lock:
            self._tokens.add(token)
        logger.info("User %r logged in", username)
        return token

    def validate(self, token: str | None) -> bool:
        if not token:
            return False
        return token in self._tokens
