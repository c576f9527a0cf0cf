#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Console logging setup for the map tools."""

from __future__ import annotations

import logging
from typing import Optional

from config import LOG_DATE_FORMAT, LOG_FORMAT


class ColoredFormatter(logging.Formatter):
    """Colours the level name only."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]
        formatted = super().format(record)
        if record.levelname in formatted:
            formatted = formatted.replace(record.levelname, f"{color}{record.levelname}{reset}", 1)
        return formatted


def setup_logging(level: str = "INFO", *, use_colors: bool = True, stream: Optional[object] = None) -> logging.Handler:
    """Install a single console handler on the root logger and return it."""

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    if use_colors:
        formatter: logging.Formatter = ColoredFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    else:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handler = logging.StreamHandler(stream)  # type: ignore[arg-type]
    handler.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger(__name__).debug("Logging initialized at %s", level)
    return handler
