# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  日志工具 - 每个模块一个 logger，输出到控制台和滚动日志文件
  Logging helper - one logger per module, writing to the console and a rotating log file.

使用示例 / Usage:
    from branchwrite.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("项目已保存 / Project saved")
"""

import logging
import os
import sys
from functools import lru_cache
from logging.handlers import RotatingFileHandler
from pathlib import Path

from branchwrite.config import config_section, settings

_logging_cfg = config_section("logging")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = str(_logging_cfg.get("file_name", "branchwrite.log"))
LOG_MAX_BYTES = int(_logging_cfg.get("max_bytes", 10 * 1024 * 1024))
LOG_BACKUP_COUNT = int(_logging_cfg.get("backup_count", 5))


def resolve_log_dir() -> Path:
    """
    日志目录：BRANCHWRITE_LOG_DIR > config.yaml logging.dir > backend/logs

    Log directory: BRANCHWRITE_LOG_DIR, then logging.dir, then backend/logs.
    """
    explicit = os.getenv("BRANCHWRITE_LOG_DIR") or _logging_cfg.get("dir")
    if explicit:
        return Path(explicit).expanduser()
    return Path(__file__).resolve().parent.parent.parent / "logs"


LOG_DIR = resolve_log_dir()
LOG_DIR.mkdir(parents=True, exist_ok=True)

_formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)


@lru_cache(maxsize=1)
def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    handler.setFormatter(_formatter)
    return handler


# Shared by every logger: exactly one RotatingFileHandler per log file
@lru_cache(maxsize=1)
def _file_handler() -> logging.Handler:
    handler = RotatingFileHandler(
        LOG_DIR / LOG_FILE_NAME,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_formatter)
    return handler


def get_logger(name: str) -> logging.Logger:
    """
    获取模块 logger

    Return the logger for ``name``, attaching the console and file handlers
    the first time it is requested. The console follows ``settings.debug``;
    the file always keeps DEBUG records.

    Args:
        name: 通常为 __name__ / Usually __name__

    Returns:
        logging.Logger
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.addHandler(_console_handler())
    logger.addHandler(_file_handler())
    return logger
