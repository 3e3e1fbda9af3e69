#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025/11/1 15:12
@version : 1.0.0
@author  : William_Trouvaille
@function: 日志配置模块
@detail:
    augkit 作为库在导入时会执行 logger.disable("augkit")，
    调用 setup_logging 后才会输出本库的日志。
"""

import os
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(
        log_dir: Optional[str] = "logs",
        console_level: str = "INFO",
        file_level: str = "DEBUG"
):
    """
    配置 Loguru 日志记录器，设置控制台和文件输出，并启用 augkit 的日志。

    此函数是幂等的：先移除所有已有的 handler 再重新添加。

    参数:
        log_dir (str | None): 日志文件目录，为 None 时只输出到控制台。
        console_level (str): 控制台最低日志级别，默认 "INFO"。
        file_level (str): 文件最低日志级别，默认 "DEBUG"，便于记录每一步的随机状态。
    """
    logger.remove()
    logger.enable("augkit")

    logger.add(
        sys.stderr,
        level=console_level.upper(),
        format=LOG_FORMAT,
        colorize=True,
        enqueue=True
    )

    if log_dir is None:
        logger.debug("未指定日志目录，仅输出到控制台。")
        return

    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as e:
        # 控制台 sink 已添加，目录不可用时只降级为控制台输出
        logger.error(f"无法创建日志目录: {log_dir}。错误: {e}")
        return

    # 每天一个日志文件
    log_file_path = os.path.join(log_dir, "augkit_{time:YYYYMMDD}.log")
    logger.add(
        log_file_path,
        level=file_level.upper(),
        format=LOG_FORMAT,
        rotation="10 MB",
        retention="10 days",
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=True
    )

    logger.info("Loguru 日志记录器配置完成。")
    logger.debug(f"控制台日志级别: {console_level.upper()}")
    logger.debug(f"文件日志级别: {file_level.upper()}")
    logger.debug(f"日志文件目录: {os.path.abspath(log_dir)}")
