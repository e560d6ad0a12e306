"""
VTubeStudio 数据模型
"""

import json
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from .exceptions import VTSParseError

API_NAME = "VTubeStudioPublicAPI"
API_VERSION = "1.0"


def encode_request(request_id: str, message_type: str, data: Optional[Dict[str, Any]] = None) -> str:
    """将请求编码为 VTS API 信封 JSON 文本"""
    return json.dumps(
        {
            "apiName": API_NAME,
            "apiVersion": API_VERSION,
            "requestID": request_id,
            "messageType": message_type,
            "data": data or {},
        },
    )


def decode_response(message: str) -> "VTSResponse":
    """解析 VTS API 响应信封

    Raises:
        VTSParseError: 文本不是合法的响应信封
    """
    try:
        response_dict = json.loads(message)
    except json.JSONDecodeError as e:
        raise VTSParseError(f"无法解析JSON响应: {e}") from e

    if not isinstance(response_dict, dict):
        raise VTSParseError(f"响应不是JSON对象: {message}")

    request_id = response_dict.get("requestID")
    message_type = response_dict.get("messageType")
    data = response_dict.get("data")
    if not isinstance(request_id, str):
        raise VTSParseError(f"响应缺少 requestID 字段: {message}")
    if not isinstance(message_type, str):
        raise VTSParseError(f"响应缺少 messageType 字段: {message}")
    if not isinstance(data, dict):
        raise VTSParseError(f"响应缺少 data 字段或类型错误: {message}")

    return VTSResponse(request_id=request_id, message_type=message_type, data=data)


@dataclass
class VTSRequest:
    """VTubeStudio API请求基类

    response_type 为该请求期望的响应 messageType
    """

    message_type: str
    response_type: str
    data: Optional[Dict[str, Any]] = None

    def to_json(self, request_id: str) -> str:
        return encode_request(request_id, self.message_type, self.data)


@dataclass
class VTSResponse:
    """VTubeStudio API响应基类"""

    request_id: str
    message_type: str
    data: Dict[str, Any]

    @classmethod
    def from_json(cls, message: str) -> "VTSResponse":
        return decode_response(message)

    @property
    def is_api_error(self) -> bool:
        return self.message_type == "APIError"


@dataclass(frozen=True)
class Credentials:
    """插件身份与认证令牌

    不可变, 认证流程的每一步返回新的副本
    """

    plugin_name: str
    plugin_developer: str
    token: Optional[str] = None

    def with_token(self, token: Optional[str]) -> "Credentials":
        return replace(self, token=token)


@dataclass
class ParameterDefinition:
    """自定义参数定义
    name: 参数名称 (字母数字，4-32字符)
    explanation: 参数说明 (可选，<256字符)
    min_value, max_value: 参数映射时的默认范围
    default_value: 参数映射时的默认值
    """

    name: str
    min_value: float = 0.0
    max_value: float = 100.0
    default_value: float = 0.0
    explanation: Optional[str] = None


@dataclass
class ParameterValue:
    """单个参数注入值"""

    id: str
    value: float
    weight: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        value_dict: Dict[str, Any] = {"id": self.id, "value": self.value}
        if self.weight is not None:
            value_dict["weight"] = self.weight
        return value_dict

    @classmethod
    def from_definition(cls, definition: ParameterDefinition, value: Optional[float] = None) -> "ParameterValue":
        """未指定 value 时使用参数定义中的默认值"""
        return cls(id=definition.name, value=definition.default_value if value is None else value)


class AuthenticationTokenRequest(VTSRequest):
    """请求认证令牌"""

    def __init__(self, plugin_name: str, plugin_developer: str):
        super().__init__(
            message_type="AuthenticationTokenRequest",
            response_type="AuthenticationTokenResponse",
            data={"pluginName": plugin_name, "pluginDeveloper": plugin_developer},
        )


class AuthenticationRequest(VTSRequest):
    """使用认证令牌进行认证"""

    def __init__(self, plugin_name: str, plugin_developer: str, authentication_token: str):
        super().__init__(
            message_type="AuthenticationRequest",
            response_type="AuthenticationResponse",
            data={
                "pluginName": plugin_name,
                "pluginDeveloper": plugin_developer,
                "authenticationToken": authentication_token,
            },
        )


class ParameterCreationRequest(VTSRequest):
    """创建新的自定义参数请求"""

    def __init__(self, definition: ParameterDefinition):
        data: Dict[str, Any] = {
            "parameterName": definition.name,
            "min": definition.min_value,
            "max": definition.max_value,
            "defaultValue": definition.default_value,
        }
        if definition.explanation:
            data["explanation"] = definition.explanation
        super().__init__(
            message_type="ParameterCreationRequest",
            response_type="ParameterCreationResponse",
            data=data,
        )


class InjectParameterDataRequest(VTSRequest):
    """为自定义参数注入数据请求"""

    def __init__(self, parameter_values: List[ParameterValue]):
        super().__init__(
            message_type="InjectParameterDataRequest",
            response_type="InjectParameterDataResponse",
            data={"parameterValues": [value.to_dict() for value in parameter_values]},
        )
