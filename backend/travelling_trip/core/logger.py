# backend/travelling_trip/core/logger.py

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from travelling_trip.core.config_loader import settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 5


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str, log_dir: Path, file_level: str = "INFO") -> logging.Logger:
    """
    Rotating file log under ``log_dir`` plus console output.

    Calling it again for the same name returns the configured logger untouched,
    so ``uvicorn --reload`` and test imports never stack handlers.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        log_dir / f"{name}.log",
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(_resolve_level(file_level))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if settings.environment != "production" else logging.INFO)

    log.setLevel(logging.DEBUG)
    log.addHandler(file_handler)
    log.addHandler(console_handler)
    return log


# -------------------------------------------------------------------
# GLOBAL LOGGER
# -------------------------------------------------------------------
logger = setup_logger("travelling_trip", Path(settings.log_dir), settings.log_level)
