"""
日志配置模块

迁移过程中的降级、近似转换都只通过日志对外可见，因此日志必须可落盘、可审计。
同一进程内只配置一次，只保留一个 file、一个 console handler。
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "alert-migrator"

_logging_configured = False


def setup_logging(
    log_dir: str = "logs",
    log_file: str = "alert-migrator.log",
    level: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    配置日志系统（多次调用只生效一次）

    Args:
        log_dir: 日志目录
        log_file: 日志文件名
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        max_bytes: 单个日志文件最大大小（字节）
        backup_count: 保留的备份文件数量

    Returns:
        logging.Logger: 配置好的 logger 实例
    """
    global _logging_configured
    logger = logging.getLogger(LOGGER_NAME)
    if _logging_configured:
        return logger

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file_path = log_path / log_file

    log_level = getattr(logging, str(level).upper(), logging.INFO)

    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = RotatingFileHandler(
        log_file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    _logging_configured = True
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """获取 logger 实例"""
    return logging.getLogger(name)
