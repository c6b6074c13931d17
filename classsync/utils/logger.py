# File: classsync/utils/logger.py
"""
Centralized logging configuration for ClassSync.
"""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

def setup_logger(name: str = "classsync", level: Optional[int] = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name
        level: Logging level (default: CLASSSYNC_LOG_LEVEL or INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    if level is None:
        level = logging.getLevelName(os.getenv("CLASSSYNC_LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    console_format = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler only when a log directory is configured
    log_dir_setting = os.getenv("CLASSSYNC_LOG_DIR")
    if log_dir_setting:
        log_dir = Path(log_dir_setting)
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f"classsync_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)

        file_format = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger

