"""Structured logging for the engine: JSON file output with rotation."""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import BaseConfig

ROOT_LOGGER_NAME = "microrepay"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

DEV_CONSOLE_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"
CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Anything on a record beyond these came from ``extra=``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    Engine call sites attach amounts, strategy names and account ids via
    ``extra``; those land under the ``"extra"`` key, with Decimals and dates
    stringified.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str)


def _console_handler(config: "BaseConfig") -> logging.Handler:
    handler = logging.StreamHandler()
    if config.DEV_MODE:
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter(DEV_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    else:
        handler.setLevel(logging.WARNING)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(config: "BaseConfig") -> logging.Logger:
    """Attach console and rotating JSON file handlers to the package logger.

    Safe to call repeatedly; previous handlers are closed and replaced.

    Args:
        config: Engine configuration providing DATA_DIR, DEV_MODE and LOG_LEVEL

    Returns:
        The ``microrepay`` logger
    """
    log_file = Path(config.DATA_DIR) / "logs" / config.LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.addHandler(_console_handler(config))
    package_logger.addHandler(_file_handler(log_file))

    package_logger.info(
        "Logging initialized",
        extra={"dev_mode": config.DEV_MODE, "log_file": str(log_file)},
    )
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return the package logger for a module, e.g. ``get_logger("engine")``."""

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
