"""Logging utilities."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config_loader import get_nested

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logger(
    name: str = "campose",
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Set up and configure a logger.

    Args:
        name: Logger name.
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional file path for logging.
        console: Whether to log to console.
        format_string: Custom format string.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers = []

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def setup_logger_from_config(
    config: Dict[str, Any],
    name: str = "campose",
) -> logging.Logger:
    """
    Set up a logger from the `logging` section of a config.

    Recognised keys: level, log_file, console, format.

    Args:
        config: Full configuration dictionary.
        name: Logger name.

    Returns:
        Configured logger instance.
    """
    return setup_logger(
        name=name,
        level=get_nested(config, "logging.level") or "INFO",
        log_file=get_nested(config, "logging.log_file"),
        console=get_nested(config, "logging.console", True),
        format_string=get_nested(config, "logging.format"),
    )


def get_logger(name: str = "campose") -> logging.Logger:
    """
    Get an existing logger or create a basic one.

    Names below the package root (e.g. "campose.CameraExtrinsics") propagate
    to the root logger's handlers and are returned as-is.

    Args:
        name: Logger name.

    Returns:
        Logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers and "." not in name:
        logger = setup_logger(name)

    return logger


class LoggerMixin:
    """Mixin class to add a package-scoped logger to any class."""

    @property
    def logger(self) -> logging.Logger:
        """Get class-specific logger."""
        if not hasattr(self, "_logger"):
            get_logger()
            self._logger = get_logger(f"campose.{self.__class__.__name__}")
        return self._logger
