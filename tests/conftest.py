import asyncio
import json
from collections import deque
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest
from websockets.exceptions import ConnectionClosedOK

from vts_set_param.clients.vtube_studio import client as client_module


def response(request_id: str, message_type: str, data: Optional[Dict[str, Any]] = None) -> str:
    return json.dumps(
        {
            "apiName": "VTubeStudioPublicAPI",
            "apiVersion": "1.0",
            "timestamp": 1625405710728,
            "requestID": request_id,
            "messageType": message_type,
            "data": data or {},
        },
    )


class FakeWebSocket:
    """记录发送的消息, 按顺序回放预设消息; 没有消息时一直等待"""

    def __init__(
        self,
        frames: Iterable[Any] = (),
        responder: Optional[Callable[[Dict[str, Any]], List[Any]]] = None,
        close_on_empty: bool = False,
    ) -> None:
        self.pending = deque(frames)
        self.responder = responder
        self.close_on_empty = close_on_empty
        self.sent_messages: List[str] = []
        self.closed = False

    async def send(self, data: str) -> None:
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent_messages.append(data)
        if self.responder is not None:
            self.pending.extend(self.responder(json.loads(data)))

    async def recv(self) -> Any:
        if self.pending:
            return self.pending.popleft()
        if self.close_on_empty or self.closed:
            raise ConnectionClosedOK(None, None)
        await asyncio.Event().wait()

    async def close(self) -> None:
        self.closed = True

    @property
    def requests(self) -> List[Dict[str, Any]]:
        return [json.loads(message) for message in self.sent_messages]

    def message_types(self) -> List[str]:
        return [request["messageType"] for request in self.requests]


class FakeVTubeStudio:
    """按请求类型回复的 VTube Studio"""

    def __init__(
        self,
        issued_tokens: Iterable[str] = ("token-1",),
        valid_tokens: Iterable[str] = ("token-1",),
        reason: str = "Token invalid",
    ) -> None:
        self.issued_tokens = deque(issued_tokens)
        self.valid_tokens = set(valid_tokens)
        self.reason = reason
        self.registered: Dict[str, Dict[str, Any]] = {}

    def __call__(self, request: Dict[str, Any]) -> List[str]:
        request_id = request["requestID"]
        message_type = request["messageType"]
        data = request["data"]

        if message_type == "AuthenticationTokenRequest":
            token = self.issued_tokens.popleft()
            return [response(request_id, "AuthenticationTokenResponse", {"authenticationToken": token})]
        if message_type == "AuthenticationRequest":
            authenticated = data["authenticationToken"] in self.valid_tokens
            reason = "Plugin authenticated." if authenticated else self.reason
            return [response(request_id, "AuthenticationResponse", {"authenticated": authenticated, "reason": reason})]
        if message_type == "ParameterCreationRequest":
            self.registered[data["parameterName"]] = data
            return [response(request_id, "ParameterCreationResponse", {"parameterName": data["parameterName"]})]
        if message_type == "InjectParameterDataRequest":
            return [response(request_id, "InjectParameterDataResponse")]
        return [response(request_id, "APIError", {"errorID": 2, "message": f"unknown {message_type}"})]


@pytest.fixture
def fake_connect(monkeypatch):
    """替换 websockets.connect, 返回与 VTubeStudio 对应的 FakeWebSocket 列表"""

    def install(vts: Optional[Callable[[Dict[str, Any]], List[Any]]] = None) -> List[FakeWebSocket]:
        sockets: List[FakeWebSocket] = []

        async def connect(endpoint: str, *args: Any, **kwargs: Any) -> FakeWebSocket:
            websocket = FakeWebSocket(responder=vts or FakeVTubeStudio())
            websocket.endpoint = endpoint
            sockets.append(websocket)
            return websocket

        monkeypatch.setattr(client_module.websockets, "connect", connect)
        return sockets

    return install
