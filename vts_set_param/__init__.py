"""
vts-set-param: VTube Studio 自定义参数命令行工具
"""

__version__ = "0.1.0"
