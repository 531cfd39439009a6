"""Engine configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigurationError

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default)
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", setting=name, value=raw) from exc
    if not value.is_finite():
        raise ConfigurationError(f"{name} must be finite, got {raw!r}", setting=name, value=raw)
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", setting=name, value=raw) from exc


class BaseConfig:
    """Settings shared by every engine instance.

    Values come from the environment (optionally via a ``.env`` file). Reading
    the configuration never touches the filesystem; ``setup_logging`` creates
    the log directory when it is first needed.
    """

    APP_NAME = "MicroRepay"
    LOG_FILENAME = "microrepay.log"
    STRATEGY_NAMES = ("avalanche", "snowball", "hybrid")

    def __init__(self) -> None:
        self.DATA_DIR = Path(os.getenv("MICROREPAY_DATA_DIR", "instance")).expanduser()
        self.DEV_MODE = _env_bool("MICROREPAY_DEV_MODE", default=True)
        self.LOG_LEVEL = os.getenv("MICROREPAY_LOG_LEVEL", "INFO").strip().upper()
        self.DEFAULT_STRATEGY = os.getenv("MICROREPAY_DEFAULT_STRATEGY", "hybrid").strip().lower()
        self.MAX_PROJECTION_MONTHS = _env_int("MICROREPAY_MAX_PROJECTION_MONTHS", 600)
        self.HYBRID_HIGH_INTEREST_THRESHOLD = _env_decimal(
            "MICROREPAY_HYBRID_HIGH_INTEREST_THRESHOLD", "0.15"
        )
        self.HYBRID_LOW_BALANCE_THRESHOLD = _env_decimal(
            "MICROREPAY_HYBRID_LOW_BALANCE_THRESHOLD", "1000"
        )
        self.HYBRID_HIGH_INTEREST_SHARE = _env_decimal("MICROREPAY_HYBRID_HIGH_INTEREST_SHARE", "0.70")
        self.validate()

    def validate(self) -> None:
        """Raise ``ConfigurationError`` for settings the engine cannot honour."""

        if self.DEFAULT_STRATEGY not in self.STRATEGY_NAMES:
            raise ConfigurationError(
                f"MICROREPAY_DEFAULT_STRATEGY must be one of {', '.join(self.STRATEGY_NAMES)}",
                setting="MICROREPAY_DEFAULT_STRATEGY",
                value=self.DEFAULT_STRATEGY,
            )
        if self.MAX_PROJECTION_MONTHS < 1:
            raise ConfigurationError(
                "MICROREPAY_MAX_PROJECTION_MONTHS must be at least 1",
                setting="MICROREPAY_MAX_PROJECTION_MONTHS",
                value=self.MAX_PROJECTION_MONTHS,
            )
        if not 0 <= self.HYBRID_HIGH_INTEREST_SHARE <= 1:
            raise ConfigurationError(
                "MICROREPAY_HYBRID_HIGH_INTEREST_SHARE must be between 0 and 1",
                setting="MICROREPAY_HYBRID_HIGH_INTEREST_SHARE",
                value=self.HYBRID_HIGH_INTEREST_SHARE,
            )
        if self.HYBRID_LOW_BALANCE_THRESHOLD < 0:
            raise ConfigurationError(
                "MICROREPAY_HYBRID_LOW_BALANCE_THRESHOLD must not be negative",
                setting="MICROREPAY_HYBRID_LOW_BALANCE_THRESHOLD",
                value=self.HYBRID_LOW_BALANCE_THRESHOLD,
            )
        if self.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigurationError(
                f"MICROREPAY_LOG_LEVEL is not a logging level: {self.LOG_LEVEL!r}",
                setting="MICROREPAY_LOG_LEVEL",
                value=self.LOG_LEVEL,
            )
