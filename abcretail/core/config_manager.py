"""
Configuration management for the ABC Retail storage console.

Handles loading, validation, and access to configuration settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, Field, ValidationError, ConfigDict

from .logging_config import redact

logger = logging.getLogger(__name__)

# Largest batch Azure Queue Storage returns from a single peek or receive
MAX_QUEUE_BATCH = 32


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AzureStorageConfig(BaseModel):
    """Storage account connection and resource names."""
    connection_string: Optional[str] = Field(
        default=None,
        description="Azure Storage connection string (required to build the storage service)"
    )
    table_name: str = "CustomerProfiles"
    blob_container: str = "product-images"
    queue_name: str = "order-events"
    file_share: str = "contracts"


class QueueConfig(BaseModel):
    """Queue listing and delete-by-id scan settings."""
    peek_max_messages: int = Field(default=MAX_QUEUE_BATCH, ge=1, le=MAX_QUEUE_BATCH)
    delete_receive_passes: int = Field(
        default=2,
        ge=1,
        description="Receive passes made while looking for a message to delete"
    )
    delete_batch_size: int = Field(default=MAX_QUEUE_BATCH, ge=1, le=MAX_QUEUE_BATCH)
    delete_visibility_timeout: int = Field(
        default=5,
        ge=1,
        description="Seconds received-but-unmatched messages stay hidden"
    )


class BlobConfig(BaseModel):
    """Blob operation settings."""
    copy_poll_interval: float = Field(
        default=1.0,
        gt=0.0,
        description="Seconds between copy status checks while renaming"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(use_enum_values=True)

    level: LogLevel = Field(default=LogLevel.INFO, validate_default=True)
    format: str = "text"
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = 5
    module_levels: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-module log levels, e.g., {'azure.core.pipeline': 'WARNING'}"
    )


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    host: str = "127.0.0.1"
    port: int = 8000


class AppConfig(BaseModel):
    """Main application configuration schema."""

    azure_storage: AzureStorageConfig = Field(default_factory=AzureStorageConfig)

    queue: QueueConfig = Field(default_factory=QueueConfig)

    blob: BlobConfig = Field(default_factory=BlobConfig)

    server: ServerConfig = Field(default_factory=ServerConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(use_enum_values=True)

    def redacted_dump(self) -> Dict[str, Any]:
        """Return the configuration as a dict with the connection string redacted."""
        config_dict = self.model_dump()
        conn = config_dict["azure_storage"].get("connection_string")
        if conn:
            config_dict["azure_storage"]["connection_string"] = redact(conn)
        return config_dict


# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    "AZURE_STORAGE_CONNECTION_STRING": ("azure_storage", "connection_string", str),
    "ABCRETAIL_TABLE_NAME": ("azure_storage", "table_name", str),
    "ABCRETAIL_BLOB_CONTAINER": ("azure_storage", "blob_container", str),
    "ABCRETAIL_QUEUE_NAME": ("azure_storage", "queue_name", str),
    "ABCRETAIL_FILE_SHARE": ("azure_storage", "file_share", str),
    "ABCRETAIL_HOST": ("server", "host", str),
    "ABCRETAIL_PORT": ("server", "port", int),
    "ABCRETAIL_LOG_LEVEL": ("logging", "level", str.upper),
    "ABCRETAIL_LOG_FILE": ("logging", "file", str),
}


class ConfigManager:
    """
    Manages application configuration loading and validation.

    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (AZURE_STORAGE_CONNECTION_STRING, ABCRETAIL_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """

    def __init__(self):
        self._config: Optional[AppConfig] = None
        self._config_file: Optional[Path] = None

    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> AppConfig:
        """
        Load and validate configuration from multiple sources.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides

        Returns:
            Validated AppConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.info("Loading configuration")

        config_dict: Dict[str, Any] = {}

        if config_file:
            config_dict = self._load_from_file(config_file)
            self._config_file = Path(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.info(f"Applied environment overrides for {len(env_config)} section(s)")

        if cli_overrides:
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.info(f"Applied {len(cli_overrides)} CLI argument overrides")

        try:
            self._config = AppConfig(**config_dict)
            logger.info("Configuration validated successfully")
            self._log_configuration()
            return self._config
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                return json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        for env_name, (section, key, convert) in ENV_OVERRIDES.items():
            if value := os.getenv(env_name):
                config.setdefault(section, {})[key] = convert(value)

        return config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _log_configuration(self) -> None:
        """Log the loaded configuration (with the connection string redacted)."""
        if not self._config:
            return

        logger.info(f"Active configuration: {json.dumps(self._config.redacted_dump(), indent=2)}")

    def get_config(self) -> AppConfig:
        """
        Get the loaded configuration.

        Returns:
            AppConfig instance

        Raises:
            RuntimeError: If configuration hasn't been loaded
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    def reload(self) -> AppConfig:
        """
        Reload configuration from the same sources.

        Returns:
            Reloaded AppConfig instance
        """
        config_file = str(self._config_file) if self._config_file else None
        return self.load(config_file=config_file)
