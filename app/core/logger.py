from __future__ import annotations

import logging
import sys

_CONFIGURED = False

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Configure the ``app`` logger with a single stdout handler.

    Safe to call more than once; later calls only adjust the level.
    """
    global _CONFIGURED
    logger = logging.getLogger("app")
    logger.setLevel(level.upper())
    if _CONFIGURED:
        return logger

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console)

    _CONFIGURED = True
    return logger
