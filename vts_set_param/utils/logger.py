import logging


def setup_logging(debug_mode: bool = False):
    """设置日志配置"""
    log_level = logging.DEBUG if debug_mode else logging.INFO
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if not debug_mode:
        # websockets 的连接细节只在调试时输出
        logging.getLogger("websockets").setLevel(logging.WARNING)


logger = logging.getLogger("VTSSetParam")
