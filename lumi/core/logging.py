"""Logging configuration."""
import logging
import sys
from pathlib import Path
from typing import Optional, Union


LOGGER_NAME = "lumi"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_initialized = False


def _resolve_level(level: Union[str, int]) -> int:
    """Map a level name like 'debug' to its logging constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Configure the package logger once.

    Modules log through logging.getLogger(__name__), which places them under
    the 'lumi' logger configured here.

    Args:
        level: Level name or constant
        log_file: Optional file to mirror console output into

    Returns:
        The configured 'lumi' logger
    """
    global _initialized

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_resolve_level(level))

    if _initialized:
        return logger

    logger.handlers.clear()
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
        except OSError as e:
            logger.warning(f"Cannot write log file {log_path}, logging to console only: {e}")
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    _initialized = True
    return logger
