"""日志设置模块"""

import os
import sys
from datetime import datetime
from pathlib import Path

from loguru import logger


def setup_logger(app_name="jianfan", project_root=None, console_output=True, console_level="INFO", file_output=True):
    """配置 Loguru 日志系统

    Args:
        app_name: 应用名称，用于日志目录
        project_root: 日志根目录，默认为当前工作目录
        console_output: 是否输出到控制台（stderr，避免污染 JSON 输出）
        console_level: 控制台日志级别
        file_output: 是否写入日志文件

    Returns:
        str | None: 日志文件路径，未写入文件时为 None
    """
    if project_root is None:
        project_root = Path.cwd()

    # 清除默认处理器
    logger.remove()

    if console_output:
        logger.add(
            sys.stderr,
            level=console_level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <blue>{elapsed}</blue> | <level>{level.icon} {level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
        )

    log_file = None
    if file_output:
        current_time = datetime.now()
        date_str = current_time.strftime("%Y-%m-%d")
        hour_str = current_time.strftime("%H")
        minute_str = current_time.strftime("%M%S")

        log_dir = os.path.join(project_root, "logs", app_name, date_str, hour_str)
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"{minute_str}.log")

        logger.add(
            log_file,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            encoding="utf-8",
            format="{time:YYYY-MM-DD HH:mm:ss} | {elapsed} | {level.icon} {level: <8} | {name}:{function}:{line} - {message}",
            enqueue=True,
        )

    logger.info(f"日志系统已初始化，应用名称: {app_name}")
    return log_file
