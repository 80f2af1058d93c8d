"""Logging configuration for the kubeprep package."""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LoggingConfig


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Set up a logger with the specified name and log level.

    Args:
        name: The name of the logger
        level: The logging level (default: logging.INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Don't add handlers if they're already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(config: Optional[LoggingConfig] = None, debug: bool = False) -> logging.Logger:
    """Configure the ``kubeprep`` logger tree from configuration.

    Args:
        config: Logging configuration (default: LoggingConfig())
        debug: Force DEBUG level

    Returns:
        The ``kubeprep`` logger
    """
    config = config or LoggingConfig()
    level = logging.DEBUG if debug else getattr(logging, config.level.upper(), logging.INFO)
    logger = setup_logger("kubeprep", level)
    for handler in logger.handlers:
        handler.setLevel(level)

    if config.file and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        log_file = Path(config.file).expanduser().absolute()
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count
        )
        file_handler.setFormatter(logging.Formatter(config.format))
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_file}")

    # Disable debug logging for noisy libraries
    if not debug:
        logging.getLogger('paramiko').setLevel(logging.WARNING)

    return logger
