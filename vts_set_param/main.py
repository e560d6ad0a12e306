"""
vts-set-param: 在 VTube Studio 中注册一个自定义参数并设置它的值
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .clients.vtube_studio import (
    Credentials,
    ParameterDefinition,
    VTSException,
    VTSPlugin,
)
from .clients.vtube_studio.client import DEFAULT_TIMEOUT
from .configs.config import TokenStore, VTSSetParamConfig, default_config_path, merge_config
from .utils.logger import logger, setup_logging

TOKEN_ENV = "TOKEN"


def non_negative_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"不是有效的数字: {text}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"不能为负数: {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    describe = VTSSetParamConfig.get_field_description
    parser = argparse.ArgumentParser(prog="vts-set-param", description="在 VTube Studio 中注册并设置自定义参数")
    # 连接配置默认为 None, 以便区分命令行显式给出的值与配置文件中的值
    parser.add_argument("-H", "--host", type=str, default=None, help=f"{describe('host')} (默认 localhost)")
    parser.add_argument("-p", "--port", type=int, default=None, help=f"{describe('port')} (默认 8001)")
    parser.add_argument("--token", type=str, default=None, help=f"{describe('token')} (环境变量 {TOKEN_ENV})")
    parser.add_argument("--plugin-name", type=str, default=None, help=describe("plugin_name"))
    parser.add_argument("--plugin-developer", type=str, default=None, help=describe("plugin_developer"))

    parser.add_argument("--param-id", type=str, required=True, help="自定义参数名称")
    parser.add_argument("--default", type=float, default=0.0, help="参数默认值")
    parser.add_argument("--value", type=float, default=None, help="要设置的值, 未指定时使用默认值")
    parser.add_argument("--min", type=float, default=0.0, help="参数最小值")
    parser.add_argument("--max", type=float, default=100.0, help="参数最大值")
    parser.add_argument("--explanation", type=str, default=None, help="参数说明")

    parser.add_argument("--config", type=Path, default=None, help="配置文件路径 (.json/.yaml)")
    parser.add_argument(
        "--timeout",
        type=non_negative_float,
        default=DEFAULT_TIMEOUT,
        help="等待单个响应的超时时间（秒）, 0 表示不限时",
    )
    parser.add_argument("--debug", action="store_true", help="启用详细调试日志")
    return parser


def cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "host": args.host,
        "port": args.port,
        "token": args.token or os.environ.get(TOKEN_ENV) or None,
        "plugin_name": args.plugin_name,
        "plugin_developer": args.plugin_developer,
    }


def parameter_from_args(args: argparse.Namespace) -> ParameterDefinition:
    return ParameterDefinition(
        name=args.param_id,
        min_value=args.min,
        max_value=args.max,
        default_value=args.default,
        explanation=args.explanation,
    )


async def set_parameter(
    config: VTSSetParamConfig,
    store: TokenStore,
    definition: ParameterDefinition,
    value: Optional[float] = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> Credentials:
    """连接并认证, 依次注册参数与注入数据; 两步都成功并断开连接后保存新发放的令牌"""
    plugin = VTSPlugin(config.to_credentials(), endpoint=config.endpoint, timeout=timeout)
    async with plugin:
        await plugin.register_parameter(definition)
        await plugin.inject_parameter_value(definition, value)

    if plugin.new_token is not None:
        store.save(plugin.new_token)
    return plugin.credentials


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    config_path: Path = args.config or default_config_path()
    try:
        file_config = VTSSetParamConfig.load_config(file_path=config_path)
        config = merge_config(file_config, cli_overrides(args))
    except (ValueError, OSError) as e:
        logger.error(f"配置文件加载失败: {config_path} {e}")
        return 1

    store = TokenStore(config_path, config)
    timeout = args.timeout if args.timeout > 0 else None

    try:
        asyncio.run(set_parameter(config, store, parameter_from_args(args), args.value, timeout))
    except VTSException as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("接收到中断信号，已退出")
        return 130

    logger.info("参数设置完成")
    return 0


if __name__ == "__main__":
    sys.exit(main())
