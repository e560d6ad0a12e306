"""
VTubeStudio 客户端异常类
"""

from typing import Optional


class VTSException(Exception):
    """VTubeStudio 客户端基础异常类"""


class VTSConnectionError(VTSException):
    """连接错误 (连接、发送或接收失败)"""


class VTSParseError(VTSException):
    """响应解析错误"""


class VTSProtocolError(VTSException):
    """协议错误: requestID 匹配但 messageType 不符"""

    def __init__(self, message: str, raw: Optional[str] = None):
        self.raw = raw
        super().__init__(f"{message}: {raw}" if raw is not None else message)


class VTSAPIError(VTSProtocolError):
    """VTS 返回的 APIError"""

    def __init__(self, error_message: str, error_id: Optional[int] = None, raw: Optional[str] = None):
        self.error_message = error_message
        self.error_id = error_id
        super().__init__(f"API错误 ({error_id}): {error_message}")
        self.raw = raw


class VTSAuthenticationError(VTSException):
    """认证错误"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class VTSTimeoutError(VTSException):
    """等待响应超时"""


class VTSPersistenceError(VTSException):
    """保存认证令牌失败, 不影响本次运行"""
