"""
Service logger: console plus optional rotating JSON file.

Usage:
    from langid.core.logger import configure, get_logger, LoggerConfig

    configure()  # LoggerConfig.from_env(): LOG_LEVEL, LOG_DIR, ...
    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/langid"))

    logger = get_logger(__name__)
    logger.info("cache ready", extra={"max_size": 5000})
"""
from langid.core.logger.config import LoggerConfig
from langid.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from langid.core.logger.setup import configure, get_logger

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
]
