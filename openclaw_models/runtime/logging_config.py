"""Centralized logging configuration module"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Whether already initialized
_initialized = False

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = "openclaw-models.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 3


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    force: bool = False,
) -> None:
    """Configure console logging and, when log_dir is given, a rotating log file"""
    global _initialized

    if _initialized and not force:
        return

    if level is None:
        from .config import get_settings
        settings = get_settings()
        level = settings.log_level
        if log_dir is None:
            log_dir = settings.log_dir

    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=MAX_LOG_BYTES,
            backupCount=BACKUP_COUNT,
            encoding='utf-8',
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=numeric_level,
        handlers=handlers,
        force=True
    )

    logging.getLogger('openclaw_models').setLevel(numeric_level)
    # Reduce log level for third-party libraries
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    _initialized = True
