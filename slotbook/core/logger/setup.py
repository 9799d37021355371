"""
Logger setup: attach console and rotating JSON file handlers from config.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from slotbook.core.logger.config import LoggerConfig
from slotbook.core.logger.formatters import JsonFormatter, PlainConsoleFormatter

_configured: Optional[LoggerConfig] = None


def configure(config: Optional[LoggerConfig] = None) -> LoggerConfig:
    """
    Configure the slotbook root logger. Uses LoggerConfig.from_env() when
    config is None. Safe to call again (handlers are replaced, not stacked).
    """
    global _configured
    config = config or LoggerConfig.from_env()
    level = getattr(logging, config.level.upper(), logging.INFO)

    root = logging.getLogger(config.root_name)
    root.setLevel(level)
    root.handlers.clear()

    if config.console:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(PlainConsoleFormatter())
        root.addHandler(console)

    if config.file_rotating and config.log_dir and config.log_dir.strip():
        try:
            os.makedirs(config.log_dir, exist_ok=True)
        except OSError:
            root.warning("Could not create log dir %s, skipping file handler", config.log_dir)
        else:
            file_handler = RotatingFileHandler(
                os.path.join(config.log_dir, f"{config.log_file_basename}.log"),
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(JsonFormatter())
            root.addHandler(file_handler)

    root.propagate = False
    _configured = config
    return config


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger, configuring the root from env on first use.
    Pass __name__ from slotbook modules so names stay under the root.
    """
    if _configured is None:
        configure()
    return logging.getLogger(name)
