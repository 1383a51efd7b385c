"""
logger.py - Logging utilities for the NDEF text tag application.

This module provides consistent logging functionality across all modules of the application.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _make_formatter():
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def setup_logger(name, log_file=None, level=logging.INFO):
    """
    Set up a logger with consistent formatting.

    Calling it again for the same name replaces the handlers added by the
    previous call instead of stacking them.

    Args:
        name (str): Logger name, typically the module or package name
        log_file (str, optional): Path to log file, if None logs to console only
        level (int, optional): Logging level

    Returns:
        Logger: Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = _make_formatter()

    # Add console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Add file handler if log_file is provided
    if log_file:
        # Ensure log directory exists
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # Create rotating file handler (10 MB per file, max 5 files)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10*1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name):
    """
    Get a logger instance by name. If neither it nor an ancestor has
    handlers, a basic console handler is attached.

    Args:
        name (str): Logger name

    Returns:
        Logger: Logger instance
    """
    logger = logging.getLogger(name)

    if not logger.hasHandlers():
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(_make_formatter())
        logger.addHandler(console_handler)

    return logger


def set_global_log_level(level):
    """
    Set the log level for all loggers.

    Args:
        level (int): Logging level (e.g., logging.INFO)
    """
    for logger_name in logging.root.manager.loggerDict:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)

    # Also set the root logger
    logging.getLogger().setLevel(level)


class LoggerMixin:
    """
    Mixin class to add logging capabilities to any class.

    Usage:
        class MyTag(LoggerMixin):
            def __init__(self):
                self.setup_logger()

            def connect(self):
                self.logger.debug("Connecting")
    """

    def setup_logger(self, name=None):
        """
        Set up logger for this instance.

        Args:
            name (str, optional): Logger name, defaults to module and class name
        """
        if not name:
            name = f"{self.__class__.__module__}.{self.__class__.__name__}"

        self.logger = logging.getLogger(name)
