"""
Project logger: rotating JSON-lines file + plain console.

Usage:
    from slotbook.core.logger import configure, get_logger, LoggerConfig

    # Configure once at startup (from_env() if no config is given)
    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/slotbook"))

    logger = get_logger(__name__)
    logger.info("Booked %s", appointment_id)
"""
from slotbook.core.logger.config import LoggerConfig
from slotbook.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from slotbook.core.logger.setup import configure, get_logger

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
]
