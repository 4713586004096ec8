"""Console logging for the mirrorc package.

Only the "mirrorc" logger hierarchy is touched, so embedding applications
keep control of the root logger. Calling configure_logging again replaces
the handler rather than stacking a second one.
"""
from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, Union

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_HANDLER_TAG = "_mirrorc_handler"
_FORMAT = "%(levelname)s | %(name)s | %(message)s"


def parse_level(level: Union[str, int, None], default: int = logging.WARNING) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    return _LEVEL_MAP.get(level.strip().upper(), default)


def configure_logging(level: Union[str, int, None] = None, stream=None) -> logging.Logger:
    logger = logging.getLogger("mirrorc")
    level_int = parse_level(level)
    logger.setLevel(level_int)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level_int)
    handler.setFormatter(logging.Formatter(_FORMAT))
    setattr(handler, _HANDLER_TAG, True)
    logger.addHandler(handler)
    return logger


def verbosity_to_level(verbose: int, fallback: Optional[str] = None) -> int:
    """-v gives INFO, -vv and beyond DEBUG; otherwise the configured fallback."""
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return parse_level(fallback)
