"""
VTubeStudio 认证流程

NO_TOKEN -> HAVE_TOKEN: AuthenticationTokenRequest
HAVE_TOKEN -> AUTHENTICATED: AuthenticationRequest 通过
HAVE_TOKEN -> NO_TOKEN: 第一次被拒绝, 丢弃令牌后重试
HAVE_TOKEN -> FAILED: 重试后仍被拒绝
"""

from enum import Enum
from typing import Callable, Optional, Tuple

from ...utils.logger import logger
from .client import VTSClient
from .exceptions import VTSAuthenticationError, VTSParseError
from .models import AuthenticationRequest, AuthenticationTokenRequest, Credentials


class AuthState(Enum):
    NO_TOKEN = "no_token"
    HAVE_TOKEN = "have_token"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


def _mask(token: str) -> str:
    return f"{token[:6]}..." if len(token) > 6 else "***"


class Authenticator:
    """认证状态机

    每一步接收一个 Credentials 并返回更新后的副本, 不修改传入的值。
    令牌被拒绝时丢弃该令牌并重新申请, 整个流程最多执行两次。
    """

    MAX_ATTEMPTS = 2

    def __init__(self, client: VTSClient, on_new_token: Optional[Callable[[str], None]] = None):
        self.client = client
        self.on_new_token = on_new_token
        self.state = AuthState.NO_TOKEN

    async def request_token(self, credentials: Credentials) -> Credentials:
        """NO_TOKEN -> HAVE_TOKEN, 任何失败都直接抛出"""
        logger.info("正在请求认证令牌, 请在VTube Studio中点击允许...")
        data = await self.client.request(
            AuthenticationTokenRequest(credentials.plugin_name, credentials.plugin_developer),
        )
        token = data.get("authenticationToken")
        if not isinstance(token, str) or not token:
            raise VTSParseError(f"认证令牌响应格式错误: {data}")

        logger.info(f"获取到认证令牌: {_mask(token)}")
        self.state = AuthState.HAVE_TOKEN
        if self.on_new_token is not None:
            self.on_new_token(token)
        return credentials.with_token(token)

    async def authenticate_once(self, credentials: Credentials) -> Tuple[bool, str]:
        """发送一次 AuthenticationRequest, 返回 (是否通过, 原因)"""
        if credentials.token is None:
            raise ValueError("authenticate_once 需要认证令牌")

        logger.info("正在使用令牌进行认证...")
        data = await self.client.request(
            AuthenticationRequest(credentials.plugin_name, credentials.plugin_developer, credentials.token),
        )
        authenticated = data.get("authenticated")
        if not isinstance(authenticated, bool):
            raise VTSParseError(f"认证响应格式错误: {data}")
        return authenticated, str(data.get("reason", ""))

    async def authenticate(self, credentials: Credentials) -> Credentials:
        """
        执行完整的认证流程

        Returns:
            Credentials: 认证通过时使用的凭据 (可能包含新令牌)

        Raises:
            VTSAuthenticationError: 重新申请令牌后仍被拒绝
        """
        self.state = AuthState.HAVE_TOKEN if credentials.token else AuthState.NO_TOKEN

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            if self.state is AuthState.NO_TOKEN:
                credentials = await self.request_token(credentials)

            authenticated, reason = await self.authenticate_once(credentials)
            if authenticated:
                self.state = AuthState.AUTHENTICATED
                logger.info("认证成功")
                return credentials

            logger.warning(f"认证失败 (第{attempt}次): {reason}")
            credentials = credentials.with_token(None)
            self.state = AuthState.NO_TOKEN

        self.state = AuthState.FAILED
        raise VTSAuthenticationError(reason)
