"""
Portfolio Advisor 日志配置。

所有模块通过 get_logger(__name__) 取得 loguru 日志器。setup_logger 负责
安装输出：控制台始终输出到 stderr，给出 log_file 时额外写入按大小轮转的日志文件。
第三方库通过标准 logging 输出的日志会被转发到同一套输出。
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as loguru_logger

# loguru 内置的日志级别
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


class StandardLoggingBridge(logging.Handler):
    """把标准 logging 的记录转交给 loguru，保留原始调用位置。"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logger(
    level: str = "INFO",
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: int = 5,
    bridge_standard_logging: bool = True,
):
    """
    重新安装日志输出。

    Args:
        level: 日志级别，见 LOG_LEVELS
        log_file: 日志文件路径，为 None 时只输出到控制台
        rotation: 日志文件轮转条件
        retention: 保留的历史日志文件个数
        bridge_standard_logging: 是否转发标准 logging 的日志

    Returns:
        loguru 日志器

    Raises:
        ValueError: 日志级别无效
    """
    log_level = level.upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"无效的日志级别: {level}")

    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        loguru_logger.add(
            str(log_path),
            level=log_level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )

    if bridge_standard_logging:
        logging.basicConfig(handlers=[StandardLoggingBridge()], level=0, force=True)

    return loguru_logger


def get_logger(name: str):
    """
    获取绑定了模块名的日志器。

    Args:
        name: 模块名，通常传入 __name__

    Returns:
        loguru 日志器
    """
    return loguru_logger.bind(module=name)


logger = setup_logger()


__all__ = [
    "setup_logger",
    "get_logger",
    "logger",
    "StandardLoggingBridge",
    "LOG_LEVELS",
    "CONSOLE_FORMAT",
    "FILE_FORMAT",
]
