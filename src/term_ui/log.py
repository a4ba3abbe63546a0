"""
Logging setup and object description helpers.

A full-screen UI owns the terminal, so log records are written to a file.
"""

import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def configure_logging(filename: Optional[str] = None, level=logging.WARNING):
    """Attach a file handler to the package logger.

    Args:
        filename: Log file path. If None, no handler is attached and records
            propagate to the root logger.
        level: Logging level of the package logger.

    Returns:
        The package logger.
    """
    logger = logging.getLogger('term_ui')
    logger.setLevel(level)
    if filename is not None:
        handler = logging.FileHandler(filename)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def obj_to_ptr(obj) -> str:
    """Return the hexadecimal identity of ``obj``."""
    return f'0x{id(obj):x}'


def obj_desc(obj) -> str:
    """Return a short description of ``obj``: ``<Type> (<identity>)``."""
    return f'{type(obj).__name__} ({obj_to_ptr(obj)})'
