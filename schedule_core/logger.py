# -*- coding: utf-8 -*-
"""Logging setup shared by every module of the planner."""
from __future__ import annotations

import logging
import sys

from schedule_core.config import LOG_LEVEL, LOG_PATH

ROOT_LOGGER_NAME = "schedule"

logger = logging.getLogger(ROOT_LOGGER_NAME)
logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

# Prevent duplicate handlers if imported multiple times
if not logger.handlers:
    try:
        LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    except OSError:
        file_handler = None

    if file_handler is not None:
        file_formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Stream handler on stderr; stdout is the MCP stdio transport
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(logging.WARNING)
    stream_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(stream_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a child of the planner logger for a module.

    :param name: Usually ``__name__`` of the calling module.
    :return: A logger that propagates to the ``schedule`` handlers.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logger.getChild(name)
