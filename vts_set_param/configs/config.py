import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field

from ..clients.vtube_studio.exceptions import VTSPersistenceError
from ..clients.vtube_studio.models import Credentials
from ..utils.logger import logger
from .base import ConfigBase

CONFIG_FILE_NAME = "vts-set-param.json"


def default_config_path() -> Path:
    """$XDG_CONFIG_HOME/vts-set-param.json, 未设置时为 ~/.config/vts-set-param.json"""
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / CONFIG_FILE_NAME


class VTSSetParamConfig(ConfigBase):
    """连接与插件身份配置, 保存在配置文件中"""

    host: str = Field(default="localhost", description="VTube Studio API 主机地址")
    port: int = Field(default=8001, ge=1, le=65535, description="VTube Studio API 端口号")
    token: Optional[str] = Field(default=None, description="VTube Studio 认证令牌")
    plugin_name: str = Field(default="vts-set-param", description="在 VTS 中显示的插件名称")
    plugin_developer: str = Field(default="Walfie", description="在 VTS 中显示的插件开发者")

    @property
    def endpoint(self) -> str:
        return f"ws://{self.host}:{self.port}"

    def to_credentials(self) -> Credentials:
        return Credentials(
            plugin_name=self.plugin_name,
            plugin_developer=self.plugin_developer,
            token=self.token or None,
        )


def merge_config(file_config: VTSSetParamConfig, overrides: Dict[str, Any]) -> VTSSetParamConfig:
    """命令行显式给出的值覆盖配置文件, 但配置文件中已保存的 token 优先"""
    values = file_config.model_dump()
    for key, value in overrides.items():
        if value is None or key not in VTSSetParamConfig.model_fields:
            continue
        if key == "token" and file_config.token:
            continue
        values[key] = value
    return VTSSetParamConfig.model_validate(values)


class TokenStore:
    """保存新发放的认证令牌, 写入失败只记录日志"""

    def __init__(self, file_path: Path, config: VTSSetParamConfig):
        self.file_path = file_path
        self.config = config

    def save(self, token: str) -> bool:
        updated = self.config.model_copy(update={"token": token})
        try:
            self._write(updated)
        except VTSPersistenceError as e:
            logger.error(f"{e}, 新令牌仅在本次运行中有效")
            return False

        self.config = updated
        logger.info(f"已写入配置文件: {self.file_path}")
        return True

    def _write(self, config: VTSSetParamConfig) -> None:
        try:
            config.dump_config(self.file_path)
        except (OSError, ValueError) as e:
            raise VTSPersistenceError(f"写入配置文件失败: {self.file_path} {e}") from e
