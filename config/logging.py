"""Loguru sink configuration shared by the CLI and host integrations."""

from __future__ import annotations

import pathlib
import sys
from typing import Optional

from loguru import logger

from config.settings import settings

LOG_FORMAT = "{time:HH:mm:ss} | {level: <8} | {message}"


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Replace loguru's default sink with the project's stdout (and file) sinks."""
    level = level or settings.log_level
    log_file = log_file or settings.log_file

    logger.remove()
    # colorize=False: host output panels are not TTYs.
    logger.add(sys.stdout, level=level, colorize=False, format=LOG_FORMAT)
    if log_file:
        pathlib.Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level, rotation="10 MB", retention="7 days")
