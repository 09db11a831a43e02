"""
Logging setup for Readsy.

Console logging is always enabled; file logging is optional and controlled
by ENABLE_FILE_LOGGING.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from readsy.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(enable_file: Optional[bool] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Configure the "readsy" logger.

    Args:
        enable_file: If True, also log to a daily file. None uses the setting.
        level: Logging level name. None uses LOG_LEVEL.

    Returns:
        The configured package logger.
    """
    if enable_file is None:
        enable_file = settings.ENABLE_FILE_LOGGING
    level_name = (level or settings.LOG_LEVEL).upper()

    logger = logging.getLogger("readsy")
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    if not has_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if enable_file:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"readsy_{datetime.now().strftime('%Y%m%d')}.log"
        # Avoid adding the same file handler twice
        if not any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file.resolve()
            for h in logger.handlers
        ):
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
