"""Logging infrastructure for oxidoc.

Key components:
    get_logger: Factory function for creating configured loggers
    setup_logging: Initialize logging configuration from YAML
    LoggingConfig: Configuration class for logging settings

Example:
    >>> from oxidoc.logging import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing started")

Note:
    Never import Python's logging module directly. Always use
    get_logger() so configuration is applied first.
"""

from .logging_config import LoggingConfig, get_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
