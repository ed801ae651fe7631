# mediashelf/common/logging.py
from __future__ import annotations

import logging

ROOT_LOGGER = "mediashelf"


def get_logger(name: str = ROOT_LOGGER, level: int | str | None = None) -> logging.Logger:
    """
    Return a named logger. If nothing has configured logging yet, we add a
    basicConfig once so library use still produces readable output.
    Without an explicit level the logger inherits from its parent.
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=level or logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if level is not None:
        logger.setLevel(level)
    return logger


def configure_logging(level: int | str) -> logging.Logger:
    """Set the package-wide level; call once where settings are wired in."""
    if isinstance(level, str):
        level = level.upper()
    return get_logger(ROOT_LOGGER, level)
