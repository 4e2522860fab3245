"""Centralized logging configuration for oxidoc.

This module provides logging configuration management. It supports both
YAML-based configuration and programmatic setup with sensible defaults.

Key features:
- YAML configuration file support
- Environment variable overrides
- Component-specific log levels
- Automatic logger creation with proper formatting

Usage:
    >>> from oxidoc.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Generating documentation")

Environment variables:
    OXIDOC_LOGGING_CONFIG: Path to custom logging.yml
    OXIDOC_LOG_LEVEL: Default log level (INFO, DEBUG, etc.)
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any

import yaml

# Default log levels for different components
DEFAULT_LOG_LEVELS = {
    "oxidoc": "INFO",
    "oxidoc.generator": "INFO",
    "oxidoc.store": "INFO",
    "oxidoc.driver": "INFO",
}


class LoggingConfig:
    """Manages logging configuration for oxidoc.

    LoggingConfig provides centralized management of logging settings,
    supporting both file-based and programmatic configuration.

    Attributes:
        config_path: Path to YAML configuration file.
        _config: Cached configuration dictionary.

    Configuration precedence:
        1. Explicit config_path parameter
        2. OXIDOC_LOGGING_CONFIG environment variable
        3. Default configuration

    Example:
        >>> # Use default configuration
        >>> config = LoggingConfig()
        >>> config.apply()
        >>>
        >>> # Use custom config file
        >>> config = LoggingConfig(Path("custom_logging.yml"))
        >>> config.apply()

    Note:
        Configuration is lazy-loaded and cached after first access.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize logging configuration.

        Args:
            config_path: Optional path to YAML configuration file.
                        If None, checks the environment and falls back
                        to the default configuration.
        """
        self.config_path = config_path or self._get_default_config_path()
        self._config: dict[str, Any] | None = None

    @staticmethod
    def _get_default_config_path() -> Path | None:
        """Get config path from OXIDOC_LOGGING_CONFIG, or None for defaults."""
        if env_path := os.environ.get("OXIDOC_LOGGING_CONFIG"):
            return Path(env_path)
        return None

    def load_config(self) -> dict[str, Any]:
        """Load logging configuration from file or defaults.

        Returns:
            Dictionary containing logging configuration in Python
            logging.config.dictConfig format.

        Note:
            Configuration is cached after first load. Create a new
            LoggingConfig instance to reload from disk.
        """
        if self._config is None:
            loaded: dict[str, Any] | None = None
            if self.config_path and self.config_path.exists():
                with open(self.config_path, "r") as f:
                    loaded = yaml.safe_load(f)
            # An empty file loads as None.
            self._config = loaded or self._get_default_config()
        return self._config

    @staticmethod
    def _get_default_config() -> dict[str, Any]:
        """Get default logging configuration.

        Diagnostics go to stderr so that query output on stdout stays clean
        for pipes and the pager.

        Default format:
            "HH:MM:SS.mmm | LEVEL | logger.name - message"
        """
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
                "detailed": {
                    "format": (
                        "%(asctime)s | %(levelname)-7s | %(name)s | "
                        "%(funcName)s:%(lineno)d - %(message)s"
                    ),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "oxidoc": {
                    "level": os.environ.get("OXIDOC_LOG_LEVEL", "INFO"),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self) -> None:
        """Apply the logging configuration to Python's logging system.

        Note:
            Multiple calls will reconfigure logging.
        """
        config = self.load_config()
        logging.config.dictConfig(config)


# Global configuration instance
_logging_config: LoggingConfig | None = None


def setup_logging(config_path: Path | None = None, level: str | None = None) -> None:
    """Setup logging for oxidoc.

    Args:
        config_path: Optional path to YAML logging configuration file.
                    If None, uses environment variables or defaults.
        level: Optional log level override (INFO, DEBUG, WARNING, etc.).
              This overrides any level set in configuration or environment.

    Example:
        >>> setup_logging()
        >>> setup_logging(level="DEBUG")
        >>> setup_logging(Path("custom.yml"), level="WARNING")
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name in DEFAULT_LOG_LEVELS:
            logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for oxidoc components.

    Automatically initializes logging if not already configured.

    Args:
        name: Logger name, typically __name__.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Module initialized")

    Note:
        Always use this function instead of logging.getLogger() so that
        configuration is applied before the first record is emitted.
    """
    if _logging_config is None:
        setup_logging()

    return logging.getLogger(name)
