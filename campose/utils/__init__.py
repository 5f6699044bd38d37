"""Utility modules."""

from .config_loader import ConfigLoader, get_nested
from .logger import LoggerMixin, get_logger, setup_logger, setup_logger_from_config

__all__ = [
    "ConfigLoader",
    "get_nested",
    "setup_logger",
    "setup_logger_from_config",
    "get_logger",
    "LoggerMixin",
]
