"""Logging configuration for the limeade namespace.

Verbosity comes from the LIMEADE environment variable (e.g. LIMEADE=debug),
which the legacy --log-level flag can override. Server processes may also
write to a rotating log file.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "limeade"
LOG_LEVEL_ENV = "LIMEADE"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVEL_NAMES = {
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "off": logging.CRITICAL + 10,
}

# Legacy --log-level values; anything above 2 means errors only
_LEGACY_LEVELS = {
    0: logging.DEBUG,
    1: logging.INFO,
    2: logging.WARNING,
}


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Translate a level name or number into a logging level.

    Unknown names fall back to the default rather than failing startup.
    """
    if value is None:
        return default
    if isinstance(value, int):
        return value
    text = value.strip().lower()
    if not text:
        return default
    if text.isdigit():
        return int(text)
    return _LEVEL_NAMES.get(text, default)


def legacy_log_level(value: int) -> int:
    """Map a legacy --log-level number onto a logging level."""
    return _LEGACY_LEVELS.get(value, logging.ERROR)


def resolve_log_level(
    legacy_level: int | None = None,
    configured: str | None = None,
) -> int:
    """Pick the effective level: legacy flag, then $LIMEADE, then config."""
    if legacy_level is not None:
        return legacy_log_level(legacy_level)
    env_value = os.environ.get(LOG_LEVEL_ENV)
    if env_value:
        return parse_level(env_value, default=parse_level(configured))
    return parse_level(configured)


def configure_logging(level: int = logging.INFO, log_file: Path | None = None) -> None:
    """Configure the limeade namespace logger.

    Console output goes to stderr so it never mixes with pasted bytes on
    stdout. When log_file is given, records are also written there with
    rotation (max 5MB per file, 3 backup files).

    Args:
        level: Logging level for all handlers.
        log_file: Optional path of a rotating log file.
    """
    limeade_logger = logging.getLogger(LOGGER_NAME)
    limeade_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates on reconfigure
    for handler in list(limeade_logger.handlers):
        limeade_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    limeade_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        limeade_logger.addHandler(file_handler)

    # Don't propagate to root logger
    limeade_logger.propagate = False
