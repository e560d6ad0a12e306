"""
VTubeStudio 客户端
"""

import asyncio
import itertools
from typing import Any, Dict, Optional

import websockets

from ...utils.logger import logger
from .exceptions import (
    VTSAPIError,
    VTSConnectionError,
    VTSProtocolError,
    VTSTimeoutError,
)
from .models import VTSRequest, VTSResponse

DEFAULT_TIMEOUT = 30.0


class VTSClient:
    """VTubeStudio WebSocket 客户端

    同一时间只有一个等待中的请求, 与当前等待的 requestID 不匹配的消息会被忽略。
    """

    def __init__(self, endpoint: str = "ws://localhost:8001", timeout: Optional[float] = DEFAULT_TIMEOUT):
        """
        初始化 VTubeStudio 客户端

        Args:
            endpoint: VTubeStudio WebSocket 端点
            timeout: 等待单个响应的超时时间（秒），None 表示不限时
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.websocket: Any = None
        self._request_ids = itertools.count()

    async def connect(self) -> None:
        """连接到 VTubeStudio"""
        logger.info(f"正在连接到VTubeStudio: {self.endpoint}")
        try:
            self.websocket = await websockets.connect(self.endpoint)
        except Exception as e:
            raise VTSConnectionError(f"连接到VTubeStudio失败: {e}") from e
        self._request_ids = itertools.count()
        logger.info("已连接到VTubeStudio")

    async def disconnect(self) -> None:
        """断开与 VTubeStudio 的连接"""
        if self.websocket is None:
            return
        try:
            await self.websocket.close()
        except Exception as e:
            logger.debug(f"关闭连接时出错: {e}")
        self.websocket = None
        logger.info("已断开与VTubeStudio的连接")

    def next_request_id(self) -> str:
        """分配下一个 requestID, 每个连接内从 0 单调递增"""
        return str(next(self._request_ids))

    async def send(self, request: VTSRequest, request_id: str) -> None:
        """发送请求信封"""
        if self.websocket is None:
            raise VTSConnectionError("未连接到VTubeStudio")

        request_json = request.to_json(request_id)
        logger.debug(f"发送请求: {request_json}")
        try:
            await self.websocket.send(request_json)
        except Exception as e:
            raise VTSConnectionError(f"发送请求失败: {e}") from e

    async def await_response(self, expected_id: str, expected_type: str) -> Dict[str, Any]:
        """
        等待与 expected_id 匹配的响应并返回其 data

        Raises:
            VTSProtocolError: requestID 匹配但 messageType 不符
            VTSAPIError: VTS 返回 APIError
            VTSTimeoutError: 超过 timeout 仍未收到匹配的响应
        """
        try:
            return await asyncio.wait_for(self._read_until(expected_id, expected_type), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise VTSTimeoutError(f"等待 {expected_type} 超时 (requestID={expected_id}, {self.timeout}秒)") from None

    async def request(self, request: VTSRequest) -> Dict[str, Any]:
        """发送请求并等待对应类型的响应"""
        request_id = self.next_request_id()
        await self.send(request, request_id)
        return await self.await_response(request_id, request.response_type)

    async def _read_until(self, expected_id: str, expected_type: str) -> Dict[str, Any]:
        while True:
            message = await self._recv()
            if not isinstance(message, str):
                logger.debug("忽略非文本消息")
                continue

            logger.debug(f"收到消息: {message}")
            response = VTSResponse.from_json(message)
            if response.request_id != expected_id:
                logger.debug(f"忽略无关消息, requestID: {response.request_id}")
                continue

            if response.is_api_error:
                error_message = response.data.get("message", "未知错误")
                error_id = response.data.get("errorID")
                raise VTSAPIError(error_message, error_id=error_id, raw=message)

            if response.message_type != expected_type:
                raise VTSProtocolError(f"期望 {expected_type}, 收到非预期响应类型 {response.message_type}", raw=message)

            return response.data

    async def _recv(self) -> Any:
        if self.websocket is None:
            raise VTSConnectionError("未连接到VTubeStudio")
        try:
            return await self.websocket.recv()
        except websockets.exceptions.ConnectionClosed as e:
            raise VTSConnectionError(f"WebSocket连接已关闭: {e}") from e
        except Exception as e:
            raise VTSConnectionError(f"接收消息时出错: {e}") from e
