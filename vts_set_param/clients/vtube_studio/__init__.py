"""
VTubeStudio 客户端模块
"""

from .auth import AuthState, Authenticator
from .client import VTSClient
from .exceptions import (
    VTSAPIError,
    VTSAuthenticationError,
    VTSConnectionError,
    VTSException,
    VTSParseError,
    VTSPersistenceError,
    VTSProtocolError,
    VTSTimeoutError,
)
from .models import (
    Credentials,
    ParameterDefinition,
    ParameterValue,
    VTSRequest,
    VTSResponse,
)
from .plugin import VTSPlugin

__all__ = [
    "AuthState",
    "Authenticator",
    "Credentials",
    "ParameterDefinition",
    "ParameterValue",
    "VTSAPIError",
    "VTSAuthenticationError",
    "VTSClient",
    "VTSConnectionError",
    "VTSException",
    "VTSParseError",
    "VTSPersistenceError",
    "VTSPlugin",
    "VTSProtocolError",
    "VTSRequest",
    "VTSResponse",
    "VTSTimeoutError",
]
