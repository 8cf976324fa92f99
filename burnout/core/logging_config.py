"""
Logging configuration for the command-line tool.

The console and the log file get separate levels: the CLI prints its own
results, so the console stays quiet unless asked, while the rotating file
under config.logs_dir keeps progress and per-line warnings.
"""

import logging
import logging.handlers
from typing import Optional

from .config import config
from .exceptions import ConfigurationError

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {name}")
    return level


def _file_handler(logger_name: str, level: int) -> logging.Handler:
    config.logs_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        config.logs_dir / f"{logger_name}.log",
        maxBytes=config.log.max_bytes,
        backupCount=config.log.backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(logger_name: str = "burnout", console_level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return the package logger.

    Args:
        logger_name: Name of the logger (the package name covers all modules)
        console_level: Overrides config.log.console_level (e.g. from -v)

    Returns:
        Configured logger instance

    Raises:
        ConfigurationError: If a configured level name is unknown

    Notes:
        - Calling it again replaces the handlers, so a changed config applies
        - No file is created when config.log.file_enabled is False
    """
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(_level(console_level or config.log.console_level))
    console.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
    logger.addHandler(console)

    if config.log.file_enabled:
        logger.addHandler(_file_handler(logger_name, _level(config.log_level)))

    # The logger must pass everything at least one handler wants
    logger.setLevel(min(handler.level for handler in logger.handlers))
    return logger
