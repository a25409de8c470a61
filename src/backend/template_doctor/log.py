"""Logging setup for template_doctor entry points."""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_NAME = "template_doctor"


def configure_logging(*, verbose: bool = False, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Configure the template_doctor logger with a single stderr handler.

    `verbose` forces DEBUG; otherwise `level` (name or number) applies, defaulting to INFO.
    """
    if verbose:
        resolved = logging.DEBUG
    elif isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
    elif level is not None:
        resolved = level
    else:
        resolved = logging.INFO

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolved)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter("[template-doctor] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging"]
