"""Logging configuration for the pses-session CLI.

Only the ``pses_session`` logger is configured, on stderr, so the JSON the
CLI prints on stdout stays machine readable and embedding applications keep
control of the root logger.
"""
import logging
import os
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "pses_session"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_HANDLER_NAME = "pses-session-cli"


def resolve_level(level_name: Optional[str] = None) -> int:
    """Map a level name (or PSES_LOGLEVEL) to a logging level, INFO if unknown."""
    name = (level_name or os.environ.get("PSES_LOGLEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logger(level_name: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach (or re-point) the CLI handler on the package logger; safe to call repeatedly."""
    level = resolve_level(level_name)
    logger = logging.getLogger(PACKAGE_LOGGER)

    handler = next((h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    # sys.stderr may have been swapped and the old one closed; setStream would flush it
    handler.stream = stream if stream is not None else sys.stderr

    logger.setLevel(level)
    return logger
