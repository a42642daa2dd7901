"""
日志配置 - 统一初始化 planner_studio 日志

使用方式：
    from planner_studio.config import get_config, setup_logging
    setup_logging(get_config())
"""

from __future__ import annotations

import logging
import logging.handlers
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .runtime_config import StudioConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 3


def setup_logging(config: StudioConfig, name: str = "planner_studio") -> logging.Logger:
    """配置包级 logger（重复调用不会重复添加 handler）"""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.logging.log_level.upper(), logging.INFO))

    if logger.handlers:
        return logger

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    if config.logging.log_to_file:
        log_path = config.logging.log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger
