"""Logger setup used by the command-line entry points."""

import logging
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


def setup_logging(level: str = 'INFO', fmt: Optional[str] = None) -> None:
    """
    Configure the root logger with a single stream handler.

    Args:
        level: Logging level name (e.g. 'INFO', 'DEBUG').
        fmt: Log record format. Defaults to DEFAULT_FORMAT.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a named logger, optionally overriding its level.

    Args:
        name: Logger name, usually the dotted module path.
        level: Optional level name.

    Returns:
        Logger instance.
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
