"""Logging setup for the flexstreak service."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    max_bytes: int = 10_000_000,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the root logger once: stderr plus an optional rotating file.

    level and log_file default to FLEXSTREAK_LOG_LEVEL / FLEXSTREAK_LOG_FILE.
    """
    level = (level or os.environ.get("FLEXSTREAK_LOG_LEVEL", "INFO")).upper()
    log_file = log_file or os.environ.get("FLEXSTREAK_LOG_FILE")

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level, logging.INFO))
    if getattr(logger, "_flexstreak_configured", False):
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file:
        Path(log_file).parent.mkdir(exist_ok=True, parents=True)
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger._flexstreak_configured = True  # type: ignore[attr-defined]
    return logger
