"""
VTubeStudio 插件高级接口
"""

from typing import Any, Dict, Optional

from ...utils.logger import logger
from .auth import AuthState, Authenticator
from .client import DEFAULT_TIMEOUT, VTSClient
from .exceptions import VTSAuthenticationError
from .models import (
    Credentials,
    InjectParameterDataRequest,
    ParameterCreationRequest,
    ParameterDefinition,
    ParameterValue,
)


class VTSPlugin:
    """VTubeStudio 插件高级接口

    连接、认证之后按顺序执行参数注册与数据注入。可作为 async 上下文管理器使用。
    """

    def __init__(
        self,
        credentials: Credentials,
        endpoint: str = "ws://localhost:8001",
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        """
        初始化 VTubeStudio 插件

        Args:
            credentials: 插件名称、开发者及已保存的认证令牌
            endpoint: VTubeStudio WebSocket 端点
            timeout: 等待单个响应的超时时间（秒）
        """
        self.credentials = credentials
        self.client = VTSClient(endpoint=endpoint, timeout=timeout)
        self.new_token: Optional[str] = None
        self.authenticator = Authenticator(self.client, on_new_token=self._on_new_token)

    async def __aenter__(self) -> "VTSPlugin":
        await self.connect_and_authenticate()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    def _on_new_token(self, token: str) -> None:
        self.new_token = token

    @property
    def is_authenticated(self) -> bool:
        return self.authenticator.state is AuthState.AUTHENTICATED

    async def connect_and_authenticate(self) -> Credentials:
        """
        连接到 VTube Studio 并执行认证流程。

        Raises:
            VTSConnectionError: 连接失败。
            VTSAuthenticationError: 认证失败。
        """
        await self.client.connect()
        try:
            self.credentials = await self.authenticator.authenticate(self.credentials)
        except BaseException:
            await self.client.disconnect()
            raise
        return self.credentials

    async def disconnect(self) -> None:
        """断开与 VTube Studio 的连接。"""
        await self.client.disconnect()

    def _ensure_authenticated(self) -> None:
        if not self.is_authenticated:
            raise VTSAuthenticationError("需要先认证才能发送请求")

    async def register_parameter(self, definition: ParameterDefinition) -> Dict[str, Any]:
        """注册自定义参数。
        重复注册同名参数是否成功完全由 VTS 决定。
        """
        self._ensure_authenticated()
        logger.info(
            f"正在注册参数 {definition.name} (min={definition.min_value}, max={definition.max_value}, "
            f"default={definition.default_value})",
        )
        return await self.client.request(ParameterCreationRequest(definition))

    async def inject_parameter_value(
        self,
        definition: ParameterDefinition,
        value: Optional[float] = None,
    ) -> Dict[str, Any]:
        """为参数注入一个值, 未指定 value 时使用参数默认值。"""
        self._ensure_authenticated()
        parameter_value = ParameterValue.from_definition(definition, value)
        logger.info(f"正在设置参数 {parameter_value.id} = {parameter_value.value}")
        return await self.client.request(InjectParameterDataRequest([parameter_value]))
