# utils/logger.py
# Application-wide logger configured from LOG_LEVEL / LOG_FILE

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

LOGGER_NAME = 'household_power'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_level=None, log_file=None, enable_console=True):
    """
    Configure the application logger.

    Args:
        log_level: level name or number (defaults to LOG_LEVEL, then WARNING)
        log_file: optional path of a log file (defaults to LOG_FILE)
        enable_console: also log to stderr

    Returns:
        The configured logging.Logger
    """
    log_level = log_level or os.getenv('LOG_LEVEL', 'WARNING')
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.WARNING
    log_file = log_file or os.getenv('LOG_FILE')

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name=None):
    """Get the application logger, or a child of it"""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
