"""Logging setup shared by every convsplit component."""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str, level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Create or fetch a configured logger.

    Components call this from their constructors, so a repeated call only
    changes the level when one is passed explicitly.

    Args:
        name: Logger name (usually the class name)
        level: Logging level name; INFO for a new logger when omitted
        log_file: Optional file to mirror log records to

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        logger.propagate = False
        logger.setLevel(logging.INFO)

    if level is not None:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
