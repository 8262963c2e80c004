"""Core module initialization."""

from .config_manager import AppConfig, ConfigManager
from .exceptions import ConfigurationError, StorageConsoleError, StorageOperationError
from .logging_config import setup_logging, get_logger
from .results import ResultStatus, StorageResult

__all__ = [
    "AppConfig",
    "ConfigManager",
    "ConfigurationError",
    "StorageConsoleError",
    "StorageOperationError",
    "setup_logging",
    "get_logger",
    "ResultStatus",
    "StorageResult",
]
