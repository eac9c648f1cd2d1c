# File: site_harvest/logger.py
"""site_harvest.logger: the ``SiteHarvest`` logger shared by every module.

Records go to stderr so that a crawl result printed on stdout stays valid
JSON. The CLI reconfigures the logger once per invocation with
:func:`init_logging`; library callers may use :func:`configure` or attach
their own handlers.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

LOGGER_NAME: Final[str] = "SiteHarvest"
LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Crawl logs are one line per page, so a few MB per file is plenty.
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3

Level = Union[int, str]


def _handlers(log_file: Optional[Union[str, Path]], fmt: str) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file), maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: Level = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = LOG_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set the level and handlers of the ``SiteHarvest`` logger.

    With *replace_handlers* the previous handlers are closed and removed,
    which keeps repeated CLI runs in one process from duplicating output.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()
    for handler in _handlers(log_file, log_format):
        lg.addHandler(handler)
    lg.propagate = False
    return lg


def init_logging(level: Level = "INFO", log_file: Union[str, Path, None] = None) -> logging.Logger:
    """Fresh stderr (and optional rotating file) output at *level*."""
    return configure(level=level, log_file=log_file)


# WARNING until the CLI applies --log-level.
logger: logging.Logger = init_logging(level="WARNING")

__all__ = ["LOGGER_NAME", "LOG_FORMAT", "configure", "init_logging", "logger"]
