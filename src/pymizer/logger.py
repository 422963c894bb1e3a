"""Centralized logging configuration for pymizer."""

import logging
import sys

# Create logger
logger = logging.getLogger('pymizer')
logger.setLevel(logging.DEBUG)

# Create console handler with formatting
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.WARNING)

# Create formatter
formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
console_handler.setFormatter(formatter)

# Add handler to logger
logger.addHandler(console_handler)


def set_log_level(level) -> None:
    """Set the level of the pymizer console handler.

    Parameters
    ----------
    level : int or str
        Logging level, e.g. ``logging.INFO`` or ``"DEBUG"``
    """
    console_handler.setLevel(level)


def get_logger(name: str = None):
    """Get a logger instance.

    Parameters
    ----------
    name : str, optional
        Logger name (typically __name__). If None, returns root package logger.

    Returns
    -------
    logging.Logger
        Configured logger instance
    """
    if name:
        if name.startswith('pymizer.'):
            name = name[len('pymizer.'):]
        return logging.getLogger(f'pymizer.{name}')
    return logger
